"""Row locking helpers for ORM repositories."""

from __future__ import annotations

import logging
from contextlib import contextmanager

from django.db import transaction  # type: ignore
from django.db.utils import OperationalError  # type: ignore

from shared.domain.exceptions import ContentionError

logger = logging.getLogger(__name__)


@contextmanager
def contention_guard(resource: str):
    """
    Translate lock wait failures into a retryable ContentionError

    PostgreSQL raises ``lock_timeout``/deadlock errors and SQLite raises
    "database is locked" as OperationalError once the wait limit passes.
    """
    try:
        yield
    except OperationalError as exc:
        logger.warning(f"Lock wait failed on {resource}: {exc}")
        raise ContentionError(
            f"Could not lock {resource} in time. Please retry."
        ) from exc


def lock_rows(queryset, resource: str) -> list:
    """
    Evaluate ``queryset`` with SELECT ... FOR UPDATE

    Must run inside transaction.atomic(); backends without row locks
    (SQLite) serialize writers at the database level instead.
    """
    if not transaction.get_connection(queryset.db).in_atomic_block:
        raise RuntimeError("Row locks require an open unit of work")

    with contention_guard(resource):
        return list(queryset.select_for_update())
