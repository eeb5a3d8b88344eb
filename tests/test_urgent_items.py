"""Tests for urgent item classification helpers."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from alerts_engine.domain.entities import (
    URGENT_TYPE_LEND_BORROW,
    UrgentItem,
    classify_days_until,
    days_until,
    describe_time_remaining,
)
from alerts_engine.utils import format_amount, resolve_timezone, start_of_day


@pytest.mark.parametrize(
    ("days", "expected"),
    [(-5, "overdue"), (-1, "overdue"), (0, "due_soon"), (3, "due_soon"), (4, "upcoming"), (7, "upcoming"), (8, None)],
)
def test_classify_days_until(days, expected):
    assert classify_days_until(days) == expected


def test_days_until_rounds_up_against_midnight():
    now = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)

    assert days_until(start_of_day(date(2026, 3, 9), timezone.utc), now) == -1
    assert days_until(start_of_day(date(2026, 3, 10), timezone.utc), now) == 0
    assert days_until(start_of_day(date(2026, 3, 13), timezone.utc), now) == 3
    assert days_until(start_of_day(date(2026, 3, 18), timezone.utc), now) == 8


@pytest.mark.parametrize(
    ("days", "expected"),
    [(-1, "1 day overdue"), (-3, "3 days overdue"), (0, "Due today"), (1, "Due tomorrow"), (5, "Due in 5 days")],
)
def test_describe_time_remaining(days, expected):
    assert describe_time_remaining(days) == expected


def test_urgent_item_notification_text_and_key():
    item = UrgentItem(
        id="loan-1",
        type=URGENT_TYPE_LEND_BORROW,
        title="Alice owes you $500.00",
        message="You lent $500.00",
        due_date=date(2026, 3, 9),
        days_until=-1,
        status="overdue",
        amount=Decimal("500"),
        currency="USD",
    )

    assert item.dedup_key == "lend_borrow:loan-1:overdue"
    assert item.priority == "high"
    assert item.severity == "error"
    assert item.notification_title() == "🚨 URGENT: Alice owes you $500.00"
    assert item.notification_body() == "You lent $500.00 - 1 day overdue"


@pytest.mark.parametrize(
    ("amount", "currency", "expected"),
    [
        (500, "USD", "$500.00"),
        (Decimal("1234.5"), "EUR", "€1,234.50"),
        (Decimal("10"), "xyz", "XYZ 10.00"),
        (-5, "USD", "-$5.00"),
        (None, None, "$0.00"),
    ],
)
def test_format_amount(amount, currency, expected):
    assert format_amount(amount, currency) == expected


@pytest.mark.parametrize(
    ("name", "offset_minutes"),
    [("UTC", 0), ("UTC+6", 360), ("GMT-03:30", -210), ("+05:45", 345), ("Not/AZone", 0), ("", 0)],
)
def test_resolve_timezone(name, offset_minutes):
    tz = resolve_timezone(name)

    offset = datetime(2026, 1, 15, tzinfo=tz).utcoffset()
    assert offset.total_seconds() == offset_minutes * 60
