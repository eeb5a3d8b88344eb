"""Domain entity representing money lent to or borrowed from someone."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

LEND_BORROW_TYPE_LEND = "lend"
LEND_BORROW_TYPE_BORROW = "borrow"

LEND_BORROW_STATUS_ACTIVE = "active"
LEND_BORROW_STATUS_OVERDUE = "overdue"
LEND_BORROW_STATUS_SETTLED = "settled"
LEND_BORROW_STATUS_CANCELLED = "cancelled"

# Records in these states still generate reminders.
LEND_BORROW_OPEN_STATUSES = (LEND_BORROW_STATUS_ACTIVE, LEND_BORROW_STATUS_OVERDUE)


@dataclass
class LendBorrow:
    """Loan between the user and another person."""

    id: str
    user_id: str
    type: str
    person_name: str
    amount: Decimal
    currency: str
    due_date: date | None
    status: str
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_lend(self) -> bool:
        """Return ``True`` when the user lent the money."""

        return self.type == LEND_BORROW_TYPE_LEND

    def is_open(self) -> bool:
        return self.status in LEND_BORROW_OPEN_STATUSES


__all__ = [
    "LendBorrow",
    "LEND_BORROW_OPEN_STATUSES",
    "LEND_BORROW_STATUS_ACTIVE",
    "LEND_BORROW_STATUS_CANCELLED",
    "LEND_BORROW_STATUS_OVERDUE",
    "LEND_BORROW_STATUS_SETTLED",
    "LEND_BORROW_TYPE_BORROW",
    "LEND_BORROW_TYPE_LEND",
]
