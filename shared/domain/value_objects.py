"""
Common Value Objects

- TimeRange: a half-open booking interval whose end may be unbounded
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from shared.domain.base import ValueObject
from shared.domain.exceptions import InvalidIntervalError

SECONDS_PER_HOUR = Decimal(3600)


@dataclass(frozen=True)
class TimeRange(ValueObject):
    """
    Time range value object

    Represents ``[start, end)``. A missing end means the range runs
    forever (an open-ended booking or an unbounded query window).
    """
    start: datetime
    end: datetime | None = None

    def __post_init__(self):
        if self.end is not None and self.end <= self.start:
            raise InvalidIntervalError(
                f"End time ({self.end.isoformat()}) must be after start time ({self.start.isoformat()})"
            )

    @property
    def is_open_ended(self) -> bool:
        return self.end is None

    def overlaps_with(self, other: 'TimeRange') -> bool:
        """
        Check if this range overlaps with another

        Half-open overlap: ``a.start < b.end AND b.start < a.end`` with a
        missing end treated as +infinity. Adjacent ranges do not overlap.

        Examples:
            - [10:00, 12:00) overlaps [11:00, 13:00) -> True
            - [10:00, 12:00) overlaps [12:00, 13:00) -> False (adjacent)
            - [10:00, -) overlaps [09:00, 10:30) -> True
        """
        if not isinstance(other, TimeRange):
            raise TypeError("Can only check overlap with another TimeRange")

        starts_before_other_ends = other.end is None or self.start < other.end
        ends_after_other_starts = self.end is None or self.end > other.start
        return starts_before_other_ends and ends_after_other_starts

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment and (self.end is None or moment < self.end)

    @property
    def hours(self) -> Decimal | None:
        """Length in hours, or None when open-ended."""
        if self.end is None:
            return None
        return Decimal(str((self.end - self.start).total_seconds())) / SECONDS_PER_HOUR

    def __str__(self):
        end = self.end.isoformat() if self.end else '...'
        return f"[{self.start.isoformat()}, {end})"
