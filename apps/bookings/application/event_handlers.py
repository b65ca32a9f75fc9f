"""
Booking event handlers

Run after the booking transaction commits. They only record the
event; push notifications to renters and owners hang off the same
events.
"""

import structlog

from apps.bookings.domain.events import BookingCancelled, BookingCompleted, BookingCreated

logger = structlog.get_logger(__name__)


def log_booking_created(event: BookingCreated):
    logger.info("booking.created", **event.to_dict())


def log_booking_completed(event: BookingCompleted):
    logger.info("booking.completed", **event.to_dict())


def log_booking_cancelled(event: BookingCancelled):
    if event.cancelled_by is None:
        logger.warning("booking.force_cancelled", **event.to_dict())
    else:
        logger.info("booking.cancelled", **event.to_dict())


def register_handlers(bus):
    bus.register_event_handler(BookingCreated, log_booking_created)
    bus.register_event_handler(BookingCompleted, log_booking_completed)
    bus.register_event_handler(BookingCancelled, log_booking_cancelled)
