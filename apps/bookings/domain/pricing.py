"""Booking pricing: hourly rate times billed hours, with a 30 minute minimum."""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from shared.domain.value_objects import TimeRange

MINIMUM_BILLABLE_HOURS = Decimal('0.5')
CENTS = Decimal('0.01')


def billable_hours(period: TimeRange) -> Decimal | None:
    """Hours billed for a period; None while the period is open-ended."""
    hours = period.hours
    if hours is None:
        return None
    return max(hours, MINIMUM_BILLABLE_HOURS)


def calculate_amount(hourly_rate: Decimal, start: datetime, end: datetime | None) -> Decimal | None:
    """
    ``round(rate * max(0.5, hours), 2)``, or None when there is no end yet

    Raises:
        InvalidIntervalError: If end is not after start
    """
    hours = billable_hours(TimeRange(start, end))
    if hours is None:
        return None
    return (Decimal(hourly_rate) * hours).quantize(CENTS, rounding=ROUND_HALF_UP)
