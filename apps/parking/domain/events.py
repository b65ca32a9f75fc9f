"""
Parking Domain Events

Events for inventory changes. Published after the change commits.
"""

from dataclasses import dataclass, field
from uuid import UUID

from shared.domain.base import DomainEvent


@dataclass
class ParkingSpaceCreated(DomainEvent):
    """A space was listed together with its initial slot pools."""
    space_id: UUID
    owner_id: UUID
    slot_counts: dict = field(default_factory=dict)


@dataclass
class SlotsAdded(DomainEvent):
    """
    Slots were appended to a category pool

    Triggers:
    - Space listing counts refresh
    """
    space_id: UUID
    category: str
    numbers: list = field(default_factory=list)


@dataclass
class SlotDeleted(DomainEvent):
    """A slot was removed; its number is retired for good."""
    space_id: UUID
    slot_id: UUID
    number: int
    cancelled_bookings: int = 0


@dataclass
class ParkingSpaceDeleted(DomainEvent):
    """
    A space was deleted after force-cancelling its bookings

    Triggers:
    - Notify renters whose bookings were cancelled
    """
    space_id: UUID
    owner_id: UUID
    cancelled_bookings: int = 0
