"""Django ORM repositories for parking spaces and slots."""

from __future__ import annotations

from typing import List
from uuid import UUID

from django.utils import timezone  # type: ignore

from apps.parking.domain.entities import ParkingSpace, Slot, VehicleCategory
from apps.parking.domain.repositories import AbstractSlotRepository, AbstractSpaceRepository
from apps.parking.models import COUNT_FIELDS, RATE_FIELDS
from apps.parking.models import ParkingSlot as SlotModel
from apps.parking.models import ParkingSpace as SpaceModel
from shared.infrastructure.locking import contention_guard, lock_rows


def space_to_domain(model: SpaceModel) -> ParkingSpace:
    return ParkingSpace(
        id=model.id,
        created_at=model.created_at,
        owner_id=model.owner_id,
        place_name=model.place_name,
        address=model.address,
        latitude=model.latitude,
        longitude=model.longitude,
        description=model.description,
        hourly_rates={category: model.rate_for(category) for category in VehicleCategory},
        total_slots={category: model.slot_count(category) for category in VehicleCategory},
        next_slot_number=model.next_slot_number,
        is_active=model.is_active,
    )


def slot_to_domain(model: SlotModel) -> Slot:
    return Slot(
        id=model.id,
        space_id=model.space_id,
        category=VehicleCategory(model.vehicle_type),
        number=model.slot_number,
        is_active=model.is_active,
    )


def _space_columns(space: ParkingSpace) -> dict:
    columns = {
        "place_name": space.place_name,
        "address": space.address,
        "latitude": space.latitude,
        "longitude": space.longitude,
        "description": space.description,
        "next_slot_number": space.next_slot_number,
        "is_active": space.is_active,
    }
    for category in VehicleCategory:
        columns[RATE_FIELDS[category]] = space.rate_for(category)
        columns[COUNT_FIELDS[category]] = space.slot_count(category)
    return columns


class DjangoSpaceRepository(AbstractSpaceRepository):

    def __init__(self, using: str | None = None):
        self.using = using

    def _queryset(self):
        return SpaceModel.objects.using(self.using)

    def get(self, space_id: UUID, *, lock: bool = False) -> ParkingSpace | None:
        queryset = self._queryset().filter(pk=space_id)
        if lock:
            rows = lock_rows(queryset, f"parking space {space_id}")
        else:
            rows = list(queryset)
        return space_to_domain(rows[0]) if rows else None

    def add(self, space: ParkingSpace):
        with contention_guard(f"parking space {space.id}"):
            self._queryset().create(id=space.id, owner_id=space.owner_id, **_space_columns(space))

    def save(self, space: ParkingSpace):
        with contention_guard(f"parking space {space.id}"):
            self._queryset().filter(pk=space.id).update(
                updated_at=timezone.now(),
                **_space_columns(space),
            )

    def delete(self, space_id: UUID):
        with contention_guard(f"parking space {space_id}"):
            self._queryset().filter(pk=space_id).delete()


class DjangoSlotRepository(AbstractSlotRepository):

    def __init__(self, using: str | None = None):
        self.using = using

    def _queryset(self):
        return SlotModel.objects.using(self.using)

    def get(self, slot_id: UUID, *, lock: bool = False) -> Slot | None:
        queryset = self._queryset().filter(pk=slot_id)
        rows = lock_rows(queryset, f"slot {slot_id}") if lock else list(queryset)
        return slot_to_domain(rows[0]) if rows else None

    def list_for_space(
        self,
        space_id: UUID,
        category: VehicleCategory | None = None,
        *,
        slot_id: UUID | None = None,
        active_only: bool = False,
        lock: bool = False,
    ) -> List[Slot]:
        queryset = self._queryset().filter(space_id=space_id)
        if category is not None:
            queryset = queryset.filter(vehicle_type=category.value)
        if slot_id is not None:
            queryset = queryset.filter(pk=slot_id)
        if active_only:
            queryset = queryset.filter(is_active=True)
        queryset = queryset.order_by("slot_number")

        if lock:
            rows = lock_rows(queryset, f"slots of space {space_id}")
        else:
            rows = list(queryset)
        return [slot_to_domain(row) for row in rows]

    def add_many(self, slots: List[Slot]):
        if not slots:
            return
        with contention_guard("slots"):
            self._queryset().bulk_create([
                SlotModel(
                    id=slot.id,
                    space_id=slot.space_id,
                    slot_number=slot.number,
                    vehicle_type=slot.category.value,
                    is_active=slot.is_active,
                )
                for slot in slots
            ])

    def delete(self, slot_id: UUID):
        with contention_guard(f"slot {slot_id}"):
            self._queryset().filter(pk=slot_id).delete()
