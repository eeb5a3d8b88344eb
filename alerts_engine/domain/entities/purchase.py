"""Domain entity representing a planned or completed purchase."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

PURCHASE_STATUS_PLANNED = "planned"
PURCHASE_STATUS_PURCHASED = "purchased"
PURCHASE_STATUS_CANCELLED = "cancelled"


@dataclass
class Purchase:
    """Item the user plans to buy, optionally by a given date."""

    id: str
    user_id: str
    title: str
    price: Decimal
    currency: str
    planned_date: date | None
    status: str
    priority: str | None = None
    created_at: datetime | None = None


__all__ = [
    "Purchase",
    "PURCHASE_STATUS_CANCELLED",
    "PURCHASE_STATUS_PLANNED",
    "PURCHASE_STATUS_PURCHASED",
]
