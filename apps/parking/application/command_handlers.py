"""
Parking Command Handlers

Use cases for owners managing their parking spaces. Each handler runs
inside the unit of work it is given.

Commands:
- CreateParkingSpaceCommand: List a new space and number its slots
- UpdateParkingSpaceCommand: Change details, rates and grow pools
- DeleteParkingSpaceCommand: Force-cancel bookings and remove a space
- CreateSlotsCommand: Add slots at an explicit starting number
- GrowSlotsCommand: Append slots after the highest issued number
- DeleteSlotCommand: Force-cancel a slot's bookings and remove it
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, List
from uuid import UUID
import logging

from apps.parking.domain.entities import ParkingSpace, Slot, VehicleCategory
from apps.parking.domain.events import ParkingSpaceCreated, ParkingSpaceDeleted, SlotDeleted
from apps.parking.domain.inventory import create_slots, grow_slots, initial_slots, resize_pool, retire_slot
from shared.application.uow import AbstractUnitOfWork
from shared.domain.exceptions import NotFoundError

logger = logging.getLogger(__name__)

# Plain attributes an owner may change on update.
DETAIL_FIELDS = ('place_name', 'address', 'latitude', 'longitude', 'description', 'is_active')


# ===== Commands =====

@dataclass
class CreateParkingSpaceCommand:
    owner_id: UUID
    place_name: str
    address: str
    latitude: Decimal | None = None
    longitude: Decimal | None = None
    description: str = ''
    hourly_rates: dict = field(default_factory=dict)
    slot_counts: dict = field(default_factory=dict)
    is_active: bool = True


@dataclass
class UpdateParkingSpaceCommand:
    """
    Partial update of a space

    ``details`` holds only the DETAIL_FIELDS that were sent. Rates and
    counts map VehicleCategory to the new value; categories left out
    keep their current value.
    """
    space_id: UUID
    owner_id: UUID
    details: dict = field(default_factory=dict)
    hourly_rates: dict = field(default_factory=dict)
    slot_counts: dict = field(default_factory=dict)


@dataclass
class DeleteParkingSpaceCommand:
    space_id: UUID
    owner_id: UUID


@dataclass
class CreateSlotsCommand:
    space_id: UUID
    owner_id: UUID
    category: VehicleCategory
    count: int
    starting_number: int


@dataclass
class GrowSlotsCommand:
    space_id: UUID
    owner_id: UUID
    category: VehicleCategory
    additional_count: int


@dataclass
class DeleteSlotCommand:
    space_id: UUID
    slot_id: UUID
    owner_id: UUID


# ===== Command Handlers =====

def _load_owned_space(uow: AbstractUnitOfWork, space_id: UUID, owner_id: UUID) -> ParkingSpace:
    space = uow.spaces.get(space_id, lock=True)
    if space is None:
        raise NotFoundError(f"Parking space {space_id} not found.")
    space.ensure_owned_by(owner_id)
    return space


class CreateParkingSpaceHandler:
    """Handler for listing a new parking space"""

    def __init__(self, uow: AbstractUnitOfWork):
        self.uow = uow

    def handle(self, command: CreateParkingSpaceCommand) -> ParkingSpace:
        counts = {VehicleCategory.parse(k): int(v) for k, v in command.slot_counts.items()}
        if any(count < 0 for count in counts.values()):
            raise ValueError("Slot count cannot be negative")

        with self.uow as uow:
            space = ParkingSpace(
                owner_id=command.owner_id,
                place_name=command.place_name,
                address=command.address,
                latitude=command.latitude,
                longitude=command.longitude,
                description=command.description,
                hourly_rates={VehicleCategory.parse(k): Decimal(v) for k, v in command.hourly_rates.items()},
                is_active=command.is_active,
            )
            slots = initial_slots(space, counts)
            space.add_event(ParkingSpaceCreated(
                aggregate_id=space.id,
                space_id=space.id,
                owner_id=space.owner_id,
                slot_counts={c.value: space.slot_count(c) for c in VehicleCategory},
            ))

            uow.spaces.add(space)
            uow.slots.add_many(slots)
            uow.collect_events(space)

        logger.info(f"Parking space {space.id} created by {space.owner_id} with {len(slots)} slots")
        return space


class UpdateParkingSpaceHandler:
    """
    Handler for updating a parking space

    Growing a pool appends new slots. Asking for fewer slots than exist
    leaves the pool untouched (see apps.parking.domain.inventory).
    """

    def __init__(self, uow: AbstractUnitOfWork):
        self.uow = uow

    def handle(self, command: UpdateParkingSpaceCommand) -> ParkingSpace:
        unknown = set(command.details) - set(DETAIL_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        with self.uow as uow:
            space = _load_owned_space(uow, command.space_id, command.owner_id)

            for name, value in command.details.items():
                setattr(space, name, value)
            for key, rate in command.hourly_rates.items():
                rate = Decimal(rate)
                if rate < 0:
                    raise ValueError("Hourly rate cannot be negative")
                space.hourly_rates[VehicleCategory.parse(key)] = rate

            new_slots: List[Slot] = []
            for key, count in command.slot_counts.items():
                new_slots.extend(resize_pool(space, VehicleCategory.parse(key), int(count)))

            uow.spaces.save(space)
            uow.slots.add_many(new_slots)
            uow.collect_events(space)

        logger.info(f"Parking space {space.id} updated, {len(new_slots)} slots added")
        return space


class DeleteParkingSpaceHandler:
    """
    Handler for deleting a parking space

    Force-cancels every confirmed booking (no attribution) before the
    space and its slots are removed, all in one transaction.
    """

    def __init__(self, uow: AbstractUnitOfWork):
        self.uow = uow

    def handle(self, command: DeleteParkingSpaceCommand) -> None:
        with self.uow as uow:
            space = _load_owned_space(uow, command.space_id, command.owner_id)
            uow.slots.list_for_space(space.id, lock=True)

            bookings = uow.bookings.list_confirmed(space_id=space.id, lock=True)
            for booking in bookings:
                booking.cancel(None)
                uow.bookings.save(booking)
                uow.collect_events(booking)

            space.add_event(ParkingSpaceDeleted(
                aggregate_id=space.id,
                space_id=space.id,
                owner_id=space.owner_id,
                cancelled_bookings=len(bookings),
            ))
            uow.spaces.delete(space.id)
            uow.collect_events(space)

        logger.info(f"Parking space {command.space_id} deleted, {len(bookings)} bookings cancelled")


class CreateSlotsHandler:

    def __init__(self, uow: AbstractUnitOfWork):
        self.uow = uow

    def handle(self, command: CreateSlotsCommand) -> List[Slot]:
        with self.uow as uow:
            space = _load_owned_space(uow, command.space_id, command.owner_id)
            slots = create_slots(
                space,
                VehicleCategory.parse(command.category),
                command.count,
                command.starting_number,
            )
            uow.spaces.save(space)
            uow.slots.add_many(slots)
            uow.collect_events(space)
        return slots


class GrowSlotsHandler:

    def __init__(self, uow: AbstractUnitOfWork):
        self.uow = uow

    def handle(self, command: GrowSlotsCommand) -> List[Slot]:
        with self.uow as uow:
            space = _load_owned_space(uow, command.space_id, command.owner_id)
            slots = grow_slots(space, VehicleCategory.parse(command.category), command.additional_count)
            uow.spaces.save(space)
            uow.slots.add_many(slots)
            uow.collect_events(space)
        return slots


class DeleteSlotHandler:
    """Handler for removing one slot; its number is never issued again."""

    def __init__(self, uow: AbstractUnitOfWork):
        self.uow = uow

    def handle(self, command: DeleteSlotCommand) -> None:
        with self.uow as uow:
            space = _load_owned_space(uow, command.space_id, command.owner_id)

            slots = uow.slots.list_for_space(space.id, slot_id=command.slot_id, lock=True)
            if not slots:
                raise NotFoundError(f"Slot {command.slot_id} not found in space {space.id}.")
            slot = slots[0]

            bookings = uow.bookings.list_confirmed(slot_id=slot.id, lock=True)
            for booking in bookings:
                booking.cancel(None)
                uow.bookings.save(booking)
                uow.collect_events(booking)

            retire_slot(space, slot)
            space.add_event(SlotDeleted(
                aggregate_id=space.id,
                space_id=space.id,
                slot_id=slot.id,
                number=slot.number,
                cancelled_bookings=len(bookings),
            ))
            uow.spaces.save(space)
            uow.slots.delete(slot.id)
            uow.collect_events(space)

        logger.info(f"Slot #{slot.number} removed from space {space.id}, {len(bookings)} bookings cancelled")


HANDLERS = {
    CreateParkingSpaceCommand: CreateParkingSpaceHandler,
    UpdateParkingSpaceCommand: UpdateParkingSpaceHandler,
    DeleteParkingSpaceCommand: DeleteParkingSpaceHandler,
    CreateSlotsCommand: CreateSlotsHandler,
    GrowSlotsCommand: GrowSlotsHandler,
    DeleteSlotCommand: DeleteSlotHandler,
}


def register_handlers(bus, uow_factory: Callable[[], AbstractUnitOfWork], *, replace: bool = False):
    """Bind every parking command to a handler running in a fresh unit of work."""
    for command_type, handler_class in HANDLERS.items():
        bus.register_command_handler(
            command_type,
            lambda command, handler_class=handler_class: handler_class(uow_factory()).handle(command),
            replace=replace,
        )
