from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from shared.domain.exceptions import InvalidIntervalError
from shared.domain.value_objects import TimeRange

T0 = datetime(2030, 1, 7, 9, 0, tzinfo=timezone.utc)


def at(hours):
    return T0 + timedelta(hours=hours)


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ((0, 2), (1, 3), True),
        ((0, 2), (2, 3), False),
        ((2, 3), (0, 2), False),
        ((0, None), (5, 6), True),
        ((5, 6), (0, None), True),
        ((3, None), (0, 3), False),
        ((0, None), (1, None), True),
        ((1, 2), (0, 4), True),
    ],
)
def test_half_open_overlap(a, b, expected):
    first = TimeRange(at(a[0]), at(a[1]) if a[1] is not None else None)
    second = TimeRange(at(b[0]), at(b[1]) if b[1] is not None else None)
    assert first.overlaps_with(second) is expected
    assert second.overlaps_with(first) is expected


def test_end_must_follow_start():
    with pytest.raises(InvalidIntervalError):
        TimeRange(at(2), at(2))
    with pytest.raises(InvalidIntervalError):
        TimeRange(at(2), at(1))


def test_hours_and_contains():
    period = TimeRange(at(0), at(0) + timedelta(minutes=90))
    assert period.hours == Decimal("1.5")
    assert period.contains(at(0))
    assert not period.contains(at(1.5))
    assert TimeRange(at(0)).hours is None
    assert TimeRange(at(0)).is_open_ended
    assert not period.is_open_ended
    assert TimeRange(at(0)).contains(at(1000))


def test_overlap_rejects_other_types():
    with pytest.raises(TypeError):
        TimeRange(at(0)).overlaps_with((at(0), at(1)))
