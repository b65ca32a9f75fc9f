"""
Repository contracts for the parking inventory.

Implementations: apps.parking.infrastructure.repositories (Django ORM)
and shared.infrastructure.memory (in-process store). ``lock=True``
takes an exclusive row lock held until the unit of work ends.
"""

from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from apps.parking.domain.entities import ParkingSpace, Slot, VehicleCategory


class AbstractSpaceRepository(ABC):

    @abstractmethod
    def get(self, space_id: UUID, *, lock: bool = False) -> ParkingSpace | None:
        pass

    @abstractmethod
    def add(self, space: ParkingSpace):
        pass

    @abstractmethod
    def save(self, space: ParkingSpace):
        pass

    @abstractmethod
    def delete(self, space_id: UUID):
        """Remove the space together with its slots and bookings."""
        pass


class AbstractSlotRepository(ABC):

    @abstractmethod
    def get(self, slot_id: UUID, *, lock: bool = False) -> Slot | None:
        pass

    @abstractmethod
    def list_for_space(
        self,
        space_id: UUID,
        category: VehicleCategory | None = None,
        *,
        slot_id: UUID | None = None,
        active_only: bool = False,
        lock: bool = False,
    ) -> List[Slot]:
        """Slots of a space ordered by number, optionally narrowed and locked."""
        pass

    @abstractmethod
    def add_many(self, slots: List[Slot]):
        pass

    @abstractmethod
    def delete(self, slot_id: UUID):
        """Remove the slot together with its bookings."""
        pass
