"""Tests for booking pricing."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from apps.bookings.domain.pricing import billable_hours, calculate_amount
from shared.domain.exceptions import InvalidIntervalError
from shared.domain.value_objects import TimeRange

START = datetime(2030, 1, 1, 10, 0, tzinfo=timezone.utc)


def test_short_stay_is_billed_as_half_an_hour():
    amount = calculate_amount(Decimal("10.00"), START, START + timedelta(minutes=10))
    assert amount == Decimal("5.00")


def test_exactly_half_an_hour():
    assert calculate_amount(Decimal("10.00"), START, START + timedelta(minutes=30)) == Decimal("5.00")


def test_forty_five_minutes_bills_three_quarters():
    assert calculate_amount(Decimal("10.00"), START, START + timedelta(minutes=45)) == Decimal("7.50")


def test_rounds_half_up_to_cents():
    # 20 minutes over the hour at 0.10/hr: 0.1 * 1.3333... = 0.1333 -> 0.13
    assert calculate_amount(Decimal("0.10"), START, START + timedelta(minutes=80)) == Decimal("0.13")
    # 1.5 h at 0.03/hr = 0.045 -> 0.05
    assert calculate_amount(Decimal("0.03"), START, START + timedelta(minutes=90)) == Decimal("0.05")


def test_open_ended_has_no_amount():
    assert calculate_amount(Decimal("10.00"), START, None) is None
    assert billable_hours(TimeRange(START, None)) is None


def test_end_before_start_is_rejected():
    with pytest.raises(InvalidIntervalError):
        calculate_amount(Decimal("10.00"), START, START)


def test_zero_rate_costs_nothing():
    assert calculate_amount(Decimal("0"), START, START + timedelta(hours=3)) == Decimal("0.00")
