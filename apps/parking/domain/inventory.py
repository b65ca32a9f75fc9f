"""
Slot Inventory

Numbering rules for the bookable units of a parking space.

Slot numbers are unique per space across all categories and are never
reused. The space keeps a high-water mark (``next_slot_number``) so a
number stays retired even after the slot carrying it is deleted.

Shrinking a pool is deliberately not supported: reducing a category's
count is a logged no-op. Removing slots safely would require proving
that no active booking references them, so it is only offered slot by
slot through an explicit delete that force-cancels the slot's bookings.
"""

import logging
from typing import List

from apps.parking.domain.entities import CATEGORY_ORDER, ParkingSpace, Slot, VehicleCategory
from apps.parking.domain.events import SlotsAdded
from shared.domain.exceptions import SlotNumberConflictError

logger = logging.getLogger(__name__)


def create_slots(
    space: ParkingSpace,
    category: VehicleCategory,
    count: int,
    starting_number: int,
) -> List[Slot]:
    """
    Create ``count`` slots numbered ``starting_number .. starting_number+count-1``

    The starting number must not fall below the space's high-water
    mark, otherwise numbers could collide with ones already issued.

    Returns:
        The new slots; the caller persists them in the same unit of work.

    Raises:
        SlotNumberConflictError: If the range overlaps issued numbers
    """
    if count < 0:
        raise ValueError("Slot count cannot be negative")
    if starting_number < 1:
        raise ValueError("Slot numbers start at 1")
    if count == 0:
        return []
    if starting_number < space.next_slot_number:
        raise SlotNumberConflictError(
            f"Slot numbers below {space.next_slot_number} are already issued "
            f"for space {space.id}; cannot start at {starting_number}."
        )

    slots = [
        Slot(space_id=space.id, category=category, number=starting_number + offset)
        for offset in range(count)
    ]
    space.next_slot_number = starting_number + count
    space.total_slots[category] += count

    space.add_event(SlotsAdded(
        aggregate_id=space.id,
        space_id=space.id,
        category=category.value,
        numbers=[slot.number for slot in slots],
    ))
    return slots


def grow_slots(space: ParkingSpace, category: VehicleCategory, additional_count: int) -> List[Slot]:
    """Append slots numbered after the highest number ever issued in the space."""
    return create_slots(space, category, additional_count, space.next_slot_number)


def initial_slots(space: ParkingSpace, counts: dict) -> List[Slot]:
    """
    Number the pools of a new space: cars first, then bikes, then other

    ``counts`` maps VehicleCategory to the requested pool size.
    """
    slots: List[Slot] = []
    for category in CATEGORY_ORDER:
        slots.extend(grow_slots(space, category, counts.get(category, 0)))
    return slots


def resize_pool(space: ParkingSpace, category: VehicleCategory, new_count: int) -> List[Slot]:
    """
    Bring a pool to ``new_count`` slots

    Growing appends slots. Shrinking is a no-op that keeps the stored
    count, so the count always matches the slots that exist.
    """
    if new_count < 0:
        raise ValueError("Slot count cannot be negative")

    current = space.slot_count(category)
    if new_count > current:
        return grow_slots(space, category, new_count - current)
    if new_count < current:
        logger.warning(
            f"Ignoring shrink of {category.value} pool for space {space.id} "
            f"from {current} to {new_count}: shrinking is not supported"
        )
    return []


def retire_slot(space: ParkingSpace, slot: Slot):
    """Account for a deleted slot. Its number stays retired."""
    if slot.space_id != space.id:
        raise ValueError(f"Slot {slot.id} does not belong to space {space.id}")
    space.total_slots[slot.category] = max(space.total_slots[slot.category] - 1, 0)
