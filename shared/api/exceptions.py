"""DRF exception handler translating domain errors into HTTP responses."""

from __future__ import annotations

import logging

from django.conf import settings  # type: ignore
from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore

from shared.domain.exceptions import (
    ContentionError,
    DomainError,
    InactiveError,
    InvalidIntervalError,
    InvalidStateError,
    NoAvailabilityError,
    NotFoundError,
    SlotNumberConflictError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    UnauthorizedError: status.HTTP_403_FORBIDDEN,
    InvalidIntervalError: status.HTTP_400_BAD_REQUEST,
    InactiveError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NoAvailabilityError: status.HTTP_409_CONFLICT,
    InvalidStateError: status.HTTP_409_CONFLICT,
    SlotNumberConflictError: status.HTTP_409_CONFLICT,
    ContentionError: status.HTTP_503_SERVICE_UNAVAILABLE,
}

DEFAULT_RETRY_AFTER = 1


def domain_exception_handler(exc, context):
    """
    Render DomainError as ``{"code", "detail"}``

    Contention answers 503 with Retry-After so clients can resend the
    whole request. Everything else falls through to DRF.
    """
    if not isinstance(exc, DomainError):
        return drf_exception_handler(exc, context)

    status_code = STATUS_BY_ERROR.get(type(exc), status.HTTP_400_BAD_REQUEST)
    view = context.get("view")
    logger.info(
        f"{view.__class__.__name__ if view else 'API'} answered {status_code}: {exc.code}"
    )

    response = Response({"code": exc.code, "detail": exc.message}, status=status_code)
    if exc.retryable:
        retry_after = getattr(settings, "PARKING_CONTENTION_RETRY_AFTER", DEFAULT_RETRY_AFTER)
        response["Retry-After"] = str(retry_after)
    return response
