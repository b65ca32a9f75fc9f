"""
Availability

The single occupancy predicate used for allocation, availability
display and occupancy counts: a slot is occupied for a window iff a
confirmed booking on it has ``start < window.end`` and
``coalesce(end, +inf) > window.start``.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable, List
from uuid import UUID

from apps.parking.domain.entities import Slot, VehicleCategory
from shared.domain.value_objects import TimeRange

from .entities import Booking


class SlotStatus(Enum):
    AVAILABLE = 'available'
    OCCUPIED = 'occupied'


@dataclass(frozen=True)
class SlotAvailability:
    slot_id: UUID
    slot_number: int
    category: VehicleCategory
    is_active: bool
    status: SlotStatus
    booking_id: UUID | None = None
    occupied_from: datetime | None = None
    occupied_until: datetime | None = None


def default_window(now: datetime) -> TimeRange:
    """Is it free right now and onward."""
    return TimeRange(now, None)


def first_free_slot(slots: Iterable[Slot], bookings: Iterable[Booking], window: TimeRange) -> Slot | None:
    """Lowest-numbered slot with no confirmed booking overlapping ``window``."""
    occupied = {b.slot_id for b in bookings if b.occupies(window)}
    for slot in sorted(slots, key=lambda s: s.number):
        if slot.id not in occupied:
            return slot
    return None

def slot_statuses(slots: Iterable[Slot], bookings: Iterable[Booking], window: TimeRange) -> List[SlotAvailability]:
    """
    Status of every slot for ``window``

    An occupied slot reports the earliest overlapping booking; its
    ``occupied_until`` is None when that booking is open-ended.
    """
    earliest: dict[UUID, Booking] = {}
    for booking in sorted(bookings, key=lambda b: b.start_time):
        if booking.occupies(window):
            earliest.setdefault(booking.slot_id, booking)

    result = []
    for slot in sorted(slots, key=lambda s: (s.category.value, s.number)):
        booking = earliest.get(slot.id)
        result.append(SlotAvailability(
            slot_id=slot.id,
            slot_number=slot.number,
            category=slot.category,
            is_active=slot.is_active,
            status=SlotStatus.OCCUPIED if booking else SlotStatus.AVAILABLE,
            booking_id=booking.id if booking else None,
            occupied_from=booking.start_time if booking else None,
            occupied_until=booking.end_time if booking else None,
        ))
    return result
