"""
Availability queries

Read-only views over the inventory and the ledger. They take no locks,
so a result may be stale by the time it is shown; allocation always
re-checks inside its own transaction.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List
from uuid import UUID

from apps.bookings.domain.availability import SlotAvailability, SlotStatus, default_window, slot_statuses
from apps.parking.domain.entities import VehicleCategory
from shared.application.uow import AbstractUnitOfWork
from shared.domain.base import utcnow
from shared.domain.exceptions import NotFoundError
from shared.domain.value_objects import TimeRange


@dataclass(frozen=True)
class CategoryCounts:
    total: int
    available: int


def _window(window_start: datetime | None, window_end: datetime | None, now: datetime | None) -> TimeRange:
    if window_start is None:
        window = default_window(now or utcnow())
        return TimeRange(window.start, window_end) if window_end is not None else window
    return TimeRange(window_start, window_end)


def get_availability(
    uow: AbstractUnitOfWork,
    space_id: UUID,
    category: VehicleCategory | None = None,
    window_start: datetime | None = None,
    window_end: datetime | None = None,
    now: datetime | None = None,
) -> List[SlotAvailability]:
    """
    Status of every slot of a space for a window

    The window defaults to ``[now, +inf)``.

    Raises:
        NotFoundError: If the space does not exist
        InvalidIntervalError: If window_end is not after window_start
    """
    window = _window(window_start, window_end, now)
    if category is not None:
        category = VehicleCategory.parse(category)

    with uow:
        space = uow.spaces.get(space_id)
        if space is None:
            raise NotFoundError(f"Parking space {space_id} not found.")
        slots = uow.slots.list_for_space(space.id, category)
        bookings = uow.bookings.find_confirmed_overlapping([s.id for s in slots], window)

    return slot_statuses(slots, bookings, window)


def category_counts(
    uow: AbstractUnitOfWork,
    space_id: UUID,
    now: datetime | None = None,
) -> Dict[VehicleCategory, CategoryCounts]:
    """Per category: slots that exist and active slots free from now on."""
    statuses = get_availability(uow, space_id, now=now)
    counts = {}
    for category in VehicleCategory:
        rows = [s for s in statuses if s.category == category]
        counts[category] = CategoryCounts(
            total=len(rows),
            available=sum(1 for s in rows if s.is_active and s.status == SlotStatus.AVAILABLE),
        )
    return counts
