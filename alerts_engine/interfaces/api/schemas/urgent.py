"""Pydantic models describing urgent items and scan results."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from alerts_engine.domain.entities import UrgentItem


class UrgentItemRead(BaseModel):
    """Loan or planned purchase inside the reminder window."""

    id: str
    type: str
    title: str
    message: str
    due_date: date
    days_until: int
    status: str
    priority: str
    amount: Decimal | None = None
    currency: str | None = None
    person_name: str | None = None
    item_name: str | None = None
    lend_borrow_type: str | None = None

    @classmethod
    def from_entity(cls, item: UrgentItem) -> "UrgentItemRead":
        return cls(
            id=item.id,
            type=item.type,
            title=item.title,
            message=item.message,
            due_date=item.due_date,
            days_until=item.days_until,
            status=item.status,
            priority=item.priority,
            amount=item.amount,
            currency=item.currency,
            person_name=item.person_name,
            item_name=item.item_name,
            lend_borrow_type=item.lend_borrow_type,
        )


class ScanResult(BaseModel):
    """Outcome of a scan request."""

    scanned: bool


__all__ = ["ScanResult", "UrgentItemRead"]
