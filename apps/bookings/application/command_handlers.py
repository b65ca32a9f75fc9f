"""
Booking Command Handlers

These are the use cases for the booking domain.
They orchestrate domain operations within a unit of work.

Commands:
- CreateBookingCommand: Reserve a free slot for a time interval
- EndBookingCommand: Close out an open or timed booking and price it
- CancelBookingCommand: Renter cancels their own booking
- OwnerCancelBookingCommand: Space owner cancels a booking on their space
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable
from uuid import UUID
import logging

from apps.bookings.domain.availability import first_free_slot
from apps.bookings.domain.entities import Booking, CancelledBy
from apps.parking.domain.entities import VehicleCategory
from shared.application.uow import AbstractUnitOfWork
from shared.domain.exceptions import NoAvailabilityError, NotFoundError
from shared.domain.value_objects import TimeRange

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class CreateBookingCommand:
    """
    Command to create a new booking

    ``slot_id`` pins the request to one slot; otherwise the
    lowest-numbered free slot of the category is taken. A missing
    ``end_time`` books the slot open-ended.
    """
    renter_id: UUID
    space_id: UUID
    category: VehicleCategory
    start_time: datetime
    end_time: datetime | None = None
    slot_id: UUID | None = None


@dataclass
class EndBookingCommand:
    """Command to close out a booking at ``end_time``"""
    booking_id: UUID
    renter_id: UUID
    end_time: datetime


@dataclass
class CancelBookingCommand:
    """Command for a renter to cancel their booking"""
    booking_id: UUID
    renter_id: UUID


@dataclass
class OwnerCancelBookingCommand:
    """Command for a space owner to cancel a booking on their space"""
    booking_id: UUID
    owner_id: UUID


# ===== Command Handlers =====

class CreateBookingHandler:
    """
    Handler for CreateBooking command

    This implements the allocation of a slot with double booking
    prevention. Availability is evaluated inside the same transaction
    that inserts the booking, after the locks are held:

    1. Open the unit of work (transaction)
    2. Lock the parking space row; reject missing or inactive spaces
    3. Read the hourly rate for the category
    4. Lock the active slots of the category in slot number order
    5. Re-read confirmed bookings overlapping the requested window
    6. Take the lowest-numbered free slot or fail with NoAvailability
    7. Insert the confirmed booking with rate and category snapshot
    8. Commit, release locks, publish BookingCreated
    """

    def __init__(self, uow: AbstractUnitOfWork):
        self.uow = uow

    def handle(self, command: CreateBookingCommand) -> Booking:
        """
        Handle booking creation

        Returns: Created Booking aggregate

        Raises:
            InvalidIntervalError: If end_time is not after start_time
            NotFoundError: If the space (or requested slot) does not exist
            InactiveError: If the space is disabled
            NoAvailabilityError: If no slot is free for the whole window
            ContentionError: If a lock could not be taken in time
        """
        category = VehicleCategory.parse(command.category)
        period = TimeRange(command.start_time, command.end_time)

        logger.info(
            f"Allocating {category.value} slot in space {command.space_id} "
            f"for renter {command.renter_id}, period {period}"
        )

        with self.uow as uow:
            space = uow.spaces.get(command.space_id, lock=True)
            if space is None:
                raise NotFoundError(f"Parking space {command.space_id} not found.")
            space.ensure_bookable()

            hourly_rate = space.rate_for(category)

            candidates = uow.slots.list_for_space(
                space.id,
                category,
                slot_id=command.slot_id,
                active_only=True,
                lock=True,
            )
            if command.slot_id is not None and not candidates:
                slot = uow.slots.get(command.slot_id)
                if slot is None or slot.space_id != space.id:
                    raise NotFoundError(f"Slot {command.slot_id} not found in space {space.id}.")

            occupying = uow.bookings.find_confirmed_overlapping([s.id for s in candidates], period)
            slot = first_free_slot(candidates, occupying, period)
            if slot is None:
                raise NoAvailabilityError("No available slots for the selected time period.")

            booking = Booking.confirm(
                renter_id=command.renter_id,
                space_id=space.id,
                slot_id=slot.id,
                category=slot.category,
                period=period,
                hourly_rate=hourly_rate,
            )
            uow.bookings.add(booking)
            uow.collect_events(booking)

        logger.info(f"Booking {booking.id} confirmed on slot #{slot.number} of space {space.id}")
        return booking


class EndBookingHandler:
    """
    Handler for closing out a booking (CONFIRMED -> COMPLETED)

    Only the renter may end a booking; anyone else is told it does not
    exist.
    """

    def __init__(self, uow: AbstractUnitOfWork):
        self.uow = uow

    def handle(self, command: EndBookingCommand) -> Booking:
        with self.uow as uow:
            booking = uow.bookings.get(command.booking_id, lock=True)
            if booking is None or booking.renter_id != command.renter_id:
                raise NotFoundError(f"Booking {command.booking_id} not found.")

            booking.complete(command.end_time)

            uow.bookings.save(booking)
            uow.collect_events(booking)

        logger.info(f"Booking {booking.id} completed, amount {booking.total_amount}")
        return booking


class CancelBookingHandler:
    """Handler for renter cancellation"""

    def __init__(self, uow: AbstractUnitOfWork):
        self.uow = uow

    def handle(self, command: CancelBookingCommand) -> Booking:
        with self.uow as uow:
            booking = uow.bookings.get(command.booking_id, lock=True)
            if booking is None or booking.renter_id != command.renter_id:
                raise NotFoundError(f"Booking {command.booking_id} not found.")

            booking.cancel(CancelledBy.USER)

            uow.bookings.save(booking)
            uow.collect_events(booking)

        logger.info(f"Booking {booking.id} cancelled by renter")
        return booking


class OwnerCancelBookingHandler:
    """Handler for cancellation by the owner of the booked space"""

    def __init__(self, uow: AbstractUnitOfWork):
        self.uow = uow

    def handle(self, command: OwnerCancelBookingCommand) -> Booking:
        with self.uow as uow:
            booking = uow.bookings.get(command.booking_id, lock=True)
            if booking is None:
                raise NotFoundError(f"Booking {command.booking_id} not found.")

            # Unlocked read: locks are always taken space first.
            space = uow.spaces.get(booking.space_id)
            if space is None:
                raise NotFoundError(f"Booking {command.booking_id} not found.")
            space.ensure_owned_by(command.owner_id)

            booking.cancel(CancelledBy.OWNER)

            uow.bookings.save(booking)
            uow.collect_events(booking)

        logger.info(f"Booking {booking.id} cancelled by owner {command.owner_id}")
        return booking


HANDLERS = {
    CreateBookingCommand: CreateBookingHandler,
    EndBookingCommand: EndBookingHandler,
    CancelBookingCommand: CancelBookingHandler,
    OwnerCancelBookingCommand: OwnerCancelBookingHandler,
}


def register_handlers(bus, uow_factory: Callable[[], AbstractUnitOfWork], *, replace: bool = False):
    """Bind every booking command to a handler running in a fresh unit of work."""
    for command_type, handler_class in HANDLERS.items():
        bus.register_command_handler(
            command_type,
            lambda command, handler_class=handler_class: handler_class(uow_factory()).handle(command),
            replace=replace,
        )
