"""
Repository contract for the reservation ledger.

The ledger is append-mostly: ``add`` inserts a confirmed booking and
``save`` only persists lifecycle fields (end_time, total_amount,
status, cancelled_by). start_time, slot_id, category and hourly_rate
are never written after insert.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List
from uuid import UUID

from shared.domain.value_objects import TimeRange

from .entities import Booking

MUTABLE_FIELDS = ('end_time', 'total_amount', 'status', 'cancelled_by')


class AbstractBookingRepository(ABC):

    @abstractmethod
    def get(self, booking_id: UUID, *, lock: bool = False) -> Booking | None:
        pass

    @abstractmethod
    def add(self, booking: Booking):
        pass

    @abstractmethod
    def save(self, booking: Booking):
        """Persist lifecycle fields only."""
        pass

    @abstractmethod
    def find_confirmed_overlapping(self, slot_ids: Iterable[UUID], window: TimeRange) -> List[Booking]:
        """Confirmed bookings on ``slot_ids`` overlapping ``window``, earliest start first."""
        pass

    @abstractmethod
    def list_confirmed(
        self,
        *,
        space_id: UUID | None = None,
        slot_id: UUID | None = None,
        lock: bool = False,
    ) -> List[Booking]:
        """Non-terminal bookings of a space or slot, used by forced cancellation."""
        pass
