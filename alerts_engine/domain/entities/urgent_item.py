"""Computed reminders derived from loans and planned purchases."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Final

from .notification import SEVERITY_ERROR, SEVERITY_INFO, SEVERITY_WARNING

URGENT_TYPE_LEND_BORROW: Final[str] = "lend_borrow"
URGENT_TYPE_PURCHASE: Final[str] = "purchase"

URGENT_STATUS_OVERDUE: Final[str] = "overdue"
URGENT_STATUS_DUE_SOON: Final[str] = "due_soon"
URGENT_STATUS_UPCOMING: Final[str] = "upcoming"

# Notification categories emitted for urgent items; they match the status names.
URGENT_CATEGORIES: Final[tuple[str, ...]] = (
    URGENT_STATUS_OVERDUE,
    URGENT_STATUS_DUE_SOON,
    URGENT_STATUS_UPCOMING,
)

DUE_SOON_MAX_DAYS: Final[int] = 3
UPCOMING_MAX_DAYS: Final[int] = 7

_SECONDS_PER_DAY: Final[int] = 24 * 60 * 60

_STATUS_ORDER: Final[dict[str, int]] = {
    URGENT_STATUS_OVERDUE: 0,
    URGENT_STATUS_DUE_SOON: 1,
    URGENT_STATUS_UPCOMING: 2,
}
_PRIORITIES: Final[dict[str, str]] = {
    URGENT_STATUS_OVERDUE: "high",
    URGENT_STATUS_DUE_SOON: "medium",
    URGENT_STATUS_UPCOMING: "low",
}
_SEVERITIES: Final[dict[str, str]] = {
    URGENT_STATUS_OVERDUE: SEVERITY_ERROR,
    URGENT_STATUS_DUE_SOON: SEVERITY_WARNING,
    URGENT_STATUS_UPCOMING: SEVERITY_INFO,
}
URGENCY_MARKERS: Final[dict[str, str]] = {
    URGENT_STATUS_OVERDUE: "🚨 URGENT: ",
    URGENT_STATUS_DUE_SOON: "⚠️ DUE SOON: ",
    URGENT_STATUS_UPCOMING: "📅 UPCOMING: ",
}


@dataclass(frozen=True)
class UrgentItem:
    """Loan or purchase whose due date falls inside the reminder window."""

    id: str
    type: str
    title: str
    message: str
    due_date: date
    days_until: int
    status: str
    amount: Decimal | None = None
    currency: str | None = None
    person_name: str | None = None
    item_name: str | None = None
    lend_borrow_type: str | None = None

    @property
    def priority(self) -> str:
        return _PRIORITIES[self.status]

    @property
    def severity(self) -> str:
        return _SEVERITIES[self.status]

    @property
    def category(self) -> str:
        return self.status

    @property
    def dedup_key(self) -> str:
        """Stable identity of the reminder, independent of its wording."""

        return f"{self.type}:{self.id}:{self.status}"

    def notification_title(self) -> str:
        return f"{URGENCY_MARKERS[self.status]}{self.title}"

    def notification_body(self) -> str:
        return f"{self.message} - {describe_time_remaining(self.days_until)}"

    def sort_key(self) -> tuple[int, int]:
        return (_STATUS_ORDER[self.status], self.days_until)


def days_until(due: datetime, now: datetime) -> int:
    """Return the number of days until ``due``, rounded up (negative when past)."""

    return math.ceil((due - now).total_seconds() / _SECONDS_PER_DAY)


def classify_days_until(days: int) -> str | None:
    """Return the urgency status for ``days`` or ``None`` when outside the window."""

    if days < 0:
        return URGENT_STATUS_OVERDUE
    if days <= DUE_SOON_MAX_DAYS:
        return URGENT_STATUS_DUE_SOON
    if days <= UPCOMING_MAX_DAYS:
        return URGENT_STATUS_UPCOMING
    return None


def describe_time_remaining(days: int) -> str:
    """Return a short human readable phrase for ``days``."""

    if days < 0:
        overdue = abs(days)
        return f"{overdue} day{'s' if overdue != 1 else ''} overdue"
    if days == 0:
        return "Due today"
    if days == 1:
        return "Due tomorrow"
    return f"Due in {days} days"


__all__ = [
    "UrgentItem",
    "URGENCY_MARKERS",
    "URGENT_CATEGORIES",
    "URGENT_STATUS_DUE_SOON",
    "URGENT_STATUS_OVERDUE",
    "URGENT_STATUS_UPCOMING",
    "URGENT_TYPE_LEND_BORROW",
    "URGENT_TYPE_PURCHASE",
    "classify_days_until",
    "days_until",
    "describe_time_remaining",
]
