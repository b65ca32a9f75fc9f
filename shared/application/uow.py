"""
Unit of Work Pattern

Every ledger operation runs inside exactly one unit of work. The unit
of work owns the transaction, hands out the repositories that read and
write inside it, and publishes collected domain events only after the
transaction has committed.

Two implementations honour the same locking contract:
- DjangoUnitOfWork: database transaction, SELECT ... FOR UPDATE row
  locks bounded by a lock wait timeout
- InMemoryUnitOfWork (shared.infrastructure.memory): per-row locks on
  an in-process store, used to exercise handlers without a database
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List
import logging

from django.conf import settings
from django.db import transaction

from shared.domain.base import DomainEvent

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.bookings.domain.repositories import AbstractBookingRepository
    from apps.parking.domain.repositories import AbstractSlotRepository, AbstractSpaceRepository

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT_MS = 5000


class AbstractUnitOfWork(ABC):
    """
    Abstract Unit of Work

    Lock order inside a unit of work is always: space row, then slot
    rows (ascending number), then booking rows.
    """

    spaces: 'AbstractSpaceRepository'
    slots: 'AbstractSlotRepository'
    bookings: 'AbstractBookingRepository'

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self):
        self._events = []
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    def commit(self):
        """Commit changes and hand collected events to the publisher."""
        logger.debug(f"Committing unit of work with {len(self._events)} events")
        events = self._events.copy()
        self._events.clear()
        self._commit()
        if events:
            self._after_commit(events)

    def rollback(self):
        """Rollback changes and discard events."""
        if self._events:
            logger.warning(f"Rolling back unit of work, discarding {len(self._events)} events")
        self._events.clear()
        self._rollback()

    def collect_events(self, aggregate):
        """Move pending events off an aggregate root into this unit of work."""
        new_events = aggregate.events
        if new_events:
            self._events.extend(new_events)
            aggregate.clear_events()
            logger.debug(
                f"Collected {len(new_events)} events from "
                f"{aggregate.__class__.__name__} (ID: {aggregate.id})"
            )

    @abstractmethod
    def _commit(self):
        pass

    @abstractmethod
    def _rollback(self):
        pass

    @abstractmethod
    def _after_commit(self, events: List[DomainEvent]):
        """Arrange for events to be published once the commit is durable."""
        pass

    @staticmethod
    def _publish_events(events: List[DomainEvent]):
        from shared.application.message_bus import message_bus

        logger.info(f"Publishing {len(events)} domain events after commit")
        try:
            message_bus.publish_events(events)
        except Exception as e:
            # The transaction is already committed; monitoring picks this up.
            logger.error(f"Error publishing events: {e}", exc_info=True)


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Django implementation of Unit of Work

    Usage:
        with DjangoUnitOfWork() as uow:
            space = uow.spaces.get(space_id, lock=True)
            ...
            uow.bookings.add(booking)
            uow.collect_events(booking)
        # Transaction commits here, events are published after commit

    On PostgreSQL the transaction sets ``lock_timeout`` so a blocked
    row lock fails with a retryable ContentionError instead of hanging.
    """

    def __init__(self, using: str | None = None):
        super().__init__()
        from apps.bookings.infrastructure.repositories import DjangoBookingRepository
        from apps.parking.infrastructure.repositories import (
            DjangoSlotRepository,
            DjangoSpaceRepository,
        )

        self.using = using
        self.spaces = DjangoSpaceRepository(using=using)
        self.slots = DjangoSlotRepository(using=using)
        self.bookings = DjangoBookingRepository(using=using)
        self._transaction = None

    def __enter__(self):
        super().__enter__()
        self._transaction = transaction.atomic(using=self.using)
        self._transaction.__enter__()
        self._apply_lock_timeout()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            super().__exit__(exc_type, exc_val, exc_tb)
        finally:
            if self._transaction:
                atomic, self._transaction = self._transaction, None
                atomic.__exit__(exc_type, exc_val, exc_tb)

    def _apply_lock_timeout(self):
        connection = transaction.get_connection(self.using)
        if connection.vendor != 'postgresql':
            return
        timeout_ms = int(getattr(settings, 'PARKING_LOCK_TIMEOUT_MS', DEFAULT_LOCK_TIMEOUT_MS))
        with connection.cursor() as cursor:
            cursor.execute("SELECT set_config('lock_timeout', %s, true)", [f"{timeout_ms}ms"])

    def _commit(self):
        # atomic() performs the actual COMMIT when the block exits.
        pass

    def _rollback(self):
        # atomic() rolls back on exception.
        pass

    def _after_commit(self, events: List[DomainEvent]):
        transaction.on_commit(lambda: self._publish_events(events), using=self.using)
