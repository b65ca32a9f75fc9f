"""
Booking Domain Entities

- BookingStatus: FSM states for the booking lifecycle
- CancelledBy: who cancelled a booking
- Booking: aggregate root for a single slot reservation
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from apps.parking.domain.entities import VehicleCategory
from shared.domain.base import Aggregate
from shared.domain.exceptions import InvalidStateError
from shared.domain.value_objects import TimeRange

from .pricing import calculate_amount


class BookingStatus(Enum):
    """
    Booking Status Finite State Machine

    State transitions:
    - CONFIRMED -> COMPLETED (renter closed out, end time known)
    - CONFIRMED -> CANCELLED (renter, owner, or space/slot deletion)

    COMPLETED and CANCELLED are terminal.
    """
    CONFIRMED = 'confirmed'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'


class CancelledBy(Enum):
    USER = 'user'
    OWNER = 'owner'


@dataclass(eq=False, kw_only=True)
class Booking(Aggregate):
    """
    Booking Aggregate Root

    Key invariants:
    - start_time, slot_id, category and hourly_rate never change after
      creation (repositories only persist the lifecycle fields)
    - total_amount is set exactly when end_time is set
    - Only CONFIRMED bookings occupy their slot
    """

    renter_id: UUID
    space_id: UUID
    slot_id: UUID
    category: VehicleCategory
    start_time: datetime
    end_time: datetime | None = None
    hourly_rate: Decimal
    total_amount: Decimal | None = None
    status: BookingStatus = BookingStatus.CONFIRMED
    cancelled_by: CancelledBy | None = None

    def __post_init__(self):
        TimeRange(self.start_time, self.end_time)
        if self.end_time is not None and self.total_amount is None:
            self.total_amount = calculate_amount(self.hourly_rate, self.start_time, self.end_time)

    @classmethod
    def confirm(
        cls,
        *,
        renter_id: UUID,
        space_id: UUID,
        slot_id: UUID,
        category: VehicleCategory,
        period: TimeRange,
        hourly_rate: Decimal,
    ) -> 'Booking':
        """Create a confirmed booking with the rate snapshotted."""
        from apps.bookings.domain.events import BookingCreated

        booking = cls(
            renter_id=renter_id,
            space_id=space_id,
            slot_id=slot_id,
            category=category,
            start_time=period.start,
            end_time=period.end,
            hourly_rate=hourly_rate,
        )
        booking.add_event(BookingCreated(
            aggregate_id=booking.id,
            booking_id=booking.id,
            renter_id=renter_id,
            space_id=space_id,
            slot_id=slot_id,
            start_time=booking.start_time,
            end_time=booking.end_time,
            total_amount=booking.total_amount,
        ))
        return booking

    @property
    def period(self) -> TimeRange:
        return TimeRange(self.start_time, self.end_time)

    @property
    def is_terminal(self) -> bool:
        return self.status in (BookingStatus.COMPLETED, BookingStatus.CANCELLED)

    def occupies(self, window: TimeRange) -> bool:
        """True when this booking blocks its slot for any part of ``window``."""
        return self.status == BookingStatus.CONFIRMED and self.period.overlaps_with(window)

    def _ensure_confirmed(self, action: str):
        if self.status != BookingStatus.CONFIRMED:
            raise InvalidStateError(
                f'Cannot {action} a booking with status "{self.status.value}".'
            )

    def complete(self, end_time: datetime):
        """
        Close out the booking (CONFIRMED -> COMPLETED)

        Prices the stay with the rate snapshotted at booking time.
        Events: BookingCompleted
        """
        self._ensure_confirmed('end')
        period = TimeRange(self.start_time, end_time)

        from apps.bookings.domain.events import BookingCompleted

        self.end_time = period.end
        self.total_amount = calculate_amount(self.hourly_rate, self.start_time, self.end_time)
        self.status = BookingStatus.COMPLETED

        self.add_event(BookingCompleted(
            aggregate_id=self.id,
            booking_id=self.id,
            renter_id=self.renter_id,
            space_id=self.space_id,
            end_time=self.end_time,
            total_amount=self.total_amount,
        ))

    def cancel(self, cancelled_by: CancelledBy | None):
        """
        Cancel the booking (CONFIRMED -> CANCELLED)

        ``cancelled_by`` is None for forced cancellation when the space
        or slot is deleted.
        Events: BookingCancelled
        """
        self._ensure_confirmed('cancel')

        from apps.bookings.domain.events import BookingCancelled

        self.status = BookingStatus.CANCELLED
        self.cancelled_by = cancelled_by

        self.add_event(BookingCancelled(
            aggregate_id=self.id,
            booking_id=self.id,
            renter_id=self.renter_id,
            space_id=self.space_id,
            cancelled_by=cancelled_by.value if cancelled_by else None,
        ))

    def __str__(self):
        return f"Booking {self.id} ({self.status.value})"
