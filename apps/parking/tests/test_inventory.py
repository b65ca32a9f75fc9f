"""Slot numbering and pool management."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from apps.parking.application.command_handlers import (
    CreateSlotsCommand,
    CreateSlotsHandler,
    DeleteSlotCommand,
    DeleteSlotHandler,
    GrowSlotsCommand,
    GrowSlotsHandler,
    UpdateParkingSpaceCommand,
    UpdateParkingSpaceHandler,
)
from apps.parking.domain.entities import ParkingSpace, VehicleCategory
from apps.parking.domain.events import SlotsAdded
from apps.parking.domain.inventory import create_slots, grow_slots, initial_slots, resize_pool
from shared.domain.exceptions import NotFoundError, SlotNumberConflictError, UnauthorizedError

CAR, BIKE, OTHER = VehicleCategory.CAR, VehicleCategory.BIKE, VehicleCategory.OTHER


def _space(**kwargs) -> ParkingSpace:
    return ParkingSpace(owner_id=uuid4(), place_name="Lot", address="1 Road", **kwargs)


def _numbers(slots):
    return [s.number for s in slots]


class TestNumbering:

    def test_initial_slots_number_cars_then_bikes_then_other(self):
        space = _space()
        slots = initial_slots(space, {CAR: 2, BIKE: 3, OTHER: 1})

        assert [(s.category, s.number) for s in slots] == [
            (CAR, 1), (CAR, 2), (BIKE, 3), (BIKE, 4), (BIKE, 5), (OTHER, 6),
        ]
        assert space.next_slot_number == 7
        assert space.total_slots == {CAR: 2, BIKE: 3, OTHER: 1}

    def test_create_slots_returns_the_requested_range(self):
        space = _space()
        slots = create_slots(space, BIKE, 3, 10)
        assert _numbers(slots) == [10, 11, 12]
        assert space.next_slot_number == 13

    def test_starting_below_high_water_mark_conflicts(self):
        space = _space()
        initial_slots(space, {CAR: 4})

        with pytest.raises(SlotNumberConflictError):
            create_slots(space, BIKE, 1, 3)
        assert space.next_slot_number == 5
        assert space.slot_count(BIKE) == 0

    def test_grow_appends_after_highest_number_across_categories(self):
        space = _space()
        initial_slots(space, {CAR: 2, OTHER: 1})
        assert _numbers(grow_slots(space, CAR, 2)) == [4, 5]

    def test_zero_count_creates_nothing(self):
        space = _space()
        assert create_slots(space, CAR, 0, 1) == []
        assert space.events == []

    def test_negative_count_is_rejected(self):
        with pytest.raises(ValueError):
            create_slots(_space(), CAR, -1, 1)

    def test_slots_added_event_lists_numbers(self):
        space = _space()
        grow_slots(space, OTHER, 2)
        event = space.events[-1]
        assert isinstance(event, SlotsAdded)
        assert event.category == "other"
        assert event.numbers == [1, 2]


class TestResize:

    def test_growing_a_pool_adds_slots(self):
        space = _space()
        initial_slots(space, {CAR: 2})
        added = resize_pool(space, CAR, 5)
        assert _numbers(added) == [3, 4, 5]
        assert space.slot_count(CAR) == 5

    def test_shrinking_is_a_logged_no_op(self, caplog):
        space = _space()
        initial_slots(space, {CAR: 3})

        with caplog.at_level("WARNING"):
            assert resize_pool(space, CAR, 1) == []

        assert space.slot_count(CAR) == 3
        assert "shrinking is not supported" in caplog.text


class TestSlotHandlers:

    def test_deleted_numbers_are_never_reused(self, make_space, uow_factory, owner_id):
        space = make_space(cars=2, bikes=1)
        with uow_factory() as uow:
            slot_two = uow.slots.list_for_space(space.id, CAR)[1]

        DeleteSlotHandler(uow_factory()).handle(
            DeleteSlotCommand(space_id=space.id, slot_id=slot_two.id, owner_id=owner_id)
        )
        added = GrowSlotsHandler(uow_factory()).handle(
            GrowSlotsCommand(space_id=space.id, owner_id=owner_id, category=CAR, additional_count=1)
        )

        assert _numbers(added) == [4]
        with uow_factory() as uow:
            numbers = _numbers(uow.slots.list_for_space(space.id))
            stored = uow.spaces.get(space.id)
        assert numbers == [1, 3, 4]
        assert stored.slot_count(CAR) == 2
        assert stored.next_slot_number == 5

    def test_create_slots_handler_rejects_issued_numbers(self, make_space, uow_factory, owner_id):
        space = make_space(cars=3)
        with pytest.raises(SlotNumberConflictError):
            CreateSlotsHandler(uow_factory()).handle(CreateSlotsCommand(
                space_id=space.id, owner_id=owner_id, category=BIKE, count=2, starting_number=2,
            ))

        created = CreateSlotsHandler(uow_factory()).handle(CreateSlotsCommand(
            space_id=space.id, owner_id=owner_id, category=BIKE, count=2, starting_number=10,
        ))
        assert _numbers(created) == [10, 11]

    def test_only_owner_may_grow(self, make_space, uow_factory):
        space = make_space(cars=1)
        with pytest.raises(UnauthorizedError):
            GrowSlotsHandler(uow_factory()).handle(
                GrowSlotsCommand(space_id=space.id, owner_id=uuid4(), category=CAR, additional_count=1)
            )

    def test_delete_unknown_slot(self, make_space, uow_factory, owner_id):
        space = make_space(cars=1)
        with pytest.raises(NotFoundError):
            DeleteSlotHandler(uow_factory()).handle(
                DeleteSlotCommand(space_id=space.id, slot_id=uuid4(), owner_id=owner_id)
            )

    def test_update_changes_rates_and_grows_pools(self, make_space, uow_factory, owner_id):
        space = make_space(cars=1)
        updated = UpdateParkingSpaceHandler(uow_factory()).handle(UpdateParkingSpaceCommand(
            space_id=space.id,
            owner_id=owner_id,
            details={"place_name": "Renamed Lot", "is_active": False},
            hourly_rates={"car": "12.50"},
            slot_counts={"bike": 2, "car": 0},
        ))

        assert updated.place_name == "Renamed Lot"
        assert updated.is_active is False
        assert updated.rate_for(CAR) == Decimal("12.50")
        assert updated.slot_count(CAR) == 1
        with uow_factory() as uow:
            bikes = uow.slots.list_for_space(space.id, BIKE)
        assert _numbers(bikes) == [2, 3]

    def test_update_rejects_unknown_fields(self, make_space, uow_factory, owner_id):
        space = make_space(cars=1)
        with pytest.raises(ValueError):
            UpdateParkingSpaceHandler(uow_factory()).handle(UpdateParkingSpaceCommand(
                space_id=space.id, owner_id=owner_id, details={"owner_id": uuid4()},
            ))
