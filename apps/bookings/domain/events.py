"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful transaction commits.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from shared.domain.base import DomainEvent


@dataclass
class BookingCreated(DomainEvent):
    """
    Event: A slot was reserved

    Triggers:
    - Notify the space owner
    """
    booking_id: UUID
    renter_id: UUID
    space_id: UUID
    slot_id: UUID
    start_time: datetime
    end_time: datetime | None
    total_amount: Decimal | None


@dataclass
class BookingCompleted(DomainEvent):
    """Event: Renter closed out the booking (CONFIRMED -> COMPLETED)"""
    booking_id: UUID
    renter_id: UUID
    space_id: UUID
    end_time: datetime
    total_amount: Decimal


@dataclass
class BookingCancelled(DomainEvent):
    """
    Event: Booking was cancelled

    ``cancelled_by`` is None when the space or slot was deleted.

    Triggers:
    - Notify the other party
    """
    booking_id: UUID
    renter_id: UUID
    space_id: UUID
    cancelled_by: str | None
