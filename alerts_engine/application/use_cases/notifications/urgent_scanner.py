"""Periodic scan that turns due loans and planned purchases into reminders."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError

from alerts_engine.domain.entities import (
    LEND_BORROW_OPEN_STATUSES,
    LEND_BORROW_STATUS_ACTIVE,
    LEND_BORROW_STATUS_OVERDUE,
    PURCHASE_STATUS_PLANNED,
    URGENT_CATEGORIES,
    URGENT_TYPE_LEND_BORROW,
    URGENT_TYPE_PURCHASE,
    LendBorrow,
    Notification,
    Purchase,
    UrgentItem,
    classify_days_until,
    days_until,
)
from alerts_engine.infrastructure.repositories import (
    LendBorrowRepository,
    NotificationRepository,
    PurchaseRepository,
)
from alerts_engine.utils import format_amount, now_in_app_timezone, start_of_day

from .dispatcher import NotificationDispatcher
from .state import ScanThrottle

logger = logging.getLogger(__name__)


class UrgentItemScanner:
    """Refresh loan statuses and emit one reminder per urgent item.

    ``scan`` is cheap to call on every foreground event: the throttle turns
    calls made within the configured interval into no-ops.
    """

    def __init__(
        self,
        *,
        loans: LendBorrowRepository,
        purchases: PurchaseRepository,
        notifications: NotificationRepository,
        dispatcher: NotificationDispatcher,
        throttle: ScanThrottle,
        max_notifications: int | None = None,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self._loans = loans
        self._purchases = purchases
        self._notifications = notifications
        self._dispatcher = dispatcher
        self._throttle = throttle
        self._max_notifications = max_notifications
        self._clock = clock

    def scan(self, user_id: str) -> bool:
        """Run a scan unless one ran recently; return whether it ran."""

        now = self._clock()
        if not self._throttle.try_acquire(user_id, now):
            return False

        self.refresh_overdue_status(user_id)
        self.cleanup_notifications(user_id)
        items = self.list_urgent_items(user_id)
        if self._max_notifications is not None:
            items = items[: self._max_notifications]
        created = self.emit_notifications(user_id, items)
        logger.info(
            "Urgent scan for user %s: %s item(s), %s new notification(s)",
            user_id,
            len(items),
            created,
        )
        return True

    def force_scan(self, user_id: str) -> bool:
        self._throttle.reset(user_id)
        return self.scan(user_id)

    def refresh_overdue_status(self, user_id: str) -> int:
        """Move active loans whose due date has passed to ``overdue``."""

        today = self._clock().date()
        try:
            ids = self._loans.list_ids_due_before(
                user_id=user_id, status=LEND_BORROW_STATUS_ACTIVE, before=today
            )
            updated = self._loans.update_status(ids, LEND_BORROW_STATUS_OVERDUE)
        except SQLAlchemyError as exc:
            self._loans.session.rollback()
            logger.error("Could not refresh overdue loans for user %s: %s", user_id, exc)
            return 0
        if updated:
            logger.info("Marked %s loan(s) overdue for user %s", updated, user_id)
        return updated

    def cleanup_notifications(self, user_id: str) -> int:
        """Hide reminders for resolved items and collapse duplicated reminders."""

        hidden = 0
        try:
            resolved_loans = self._loans.list(
                user_id=user_id, exclude_statuses=LEND_BORROW_OPEN_STATUSES
            )
            hidden += self._notifications.soft_delete_by_sources(
                user_id,
                source_type=URGENT_TYPE_LEND_BORROW,
                source_ids=[loan.id for loan in resolved_loans],
                categories=URGENT_CATEGORIES,
            )
        except SQLAlchemyError as exc:
            self._notifications.session.rollback()
            logger.warning("Could not clear reminders for settled loans of user %s: %s", user_id, exc)

        try:
            resolved_purchases = self._purchases.list(
                user_id=user_id, exclude_statuses=(PURCHASE_STATUS_PLANNED,)
            )
            hidden += self._notifications.soft_delete_by_sources(
                user_id,
                source_type=URGENT_TYPE_PURCHASE,
                source_ids=[purchase.id for purchase in resolved_purchases],
                categories=URGENT_CATEGORIES,
            )
        except SQLAlchemyError as exc:
            self._notifications.session.rollback()
            logger.warning(
                "Could not clear reminders for completed purchases of user %s: %s", user_id, exc
            )

        try:
            hidden += self._collapse_duplicates(user_id)
        except SQLAlchemyError as exc:
            self._notifications.session.rollback()
            logger.warning("Could not collapse duplicate reminders for user %s: %s", user_id, exc)
        return hidden

    def list_urgent_items(self, user_id: str) -> list[UrgentItem]:
        """Return urgent items ordered by status, then by days until due."""

        now = self._clock()
        items: list[UrgentItem] = []

        try:
            loans = self._loans.list(user_id=user_id, statuses=LEND_BORROW_OPEN_STATUSES)
        except SQLAlchemyError as exc:
            self._loans.session.rollback()
            logger.error("Could not load loans for user %s: %s", user_id, exc)
            loans = []
        for loan in loans:
            item = _loan_to_item(loan, now)
            if item is not None:
                items.append(item)

        try:
            purchases = self._purchases.list(
                user_id=user_id, statuses=(PURCHASE_STATUS_PLANNED,), with_planned_date=True
            )
        except SQLAlchemyError as exc:
            self._purchases.session.rollback()
            logger.error("Could not load planned purchases for user %s: %s", user_id, exc)
            purchases = []
        for purchase in purchases:
            item = _purchase_to_item(purchase, now)
            if item is not None:
                items.append(item)

        items.sort(key=UrgentItem.sort_key)
        return items

    def emit_notifications(self, user_id: str, items: list[UrgentItem]) -> int:
        """Queue a reminder for every item that has no live notification yet."""

        queued = 0
        for item in items:
            try:
                if self._emit(user_id, item):
                    queued += 1
            except SQLAlchemyError as exc:
                self._notifications.session.rollback()
                logger.error(
                    "Could not emit reminder %s for user %s: %s", item.dedup_key, user_id, exc
                )
        return queued

    def clear_all(self, user_id: str) -> int:
        """Hide every urgent reminder of ``user_id``."""

        try:
            return self._notifications.soft_delete_by_categories(user_id, URGENT_CATEGORIES)
        except SQLAlchemyError as exc:
            self._notifications.session.rollback()
            logger.error("Could not clear urgent reminders for user %s: %s", user_id, exc)
            return 0

    def _emit(self, user_id: str, item: UrgentItem) -> bool:
        title = item.notification_title()
        body = item.notification_body()

        self._notifications.soft_delete_superseded(
            user_id,
            source_type=item.type,
            source_id=item.id,
            keep_dedup_key=item.dedup_key,
        )

        existing = self._notifications.find_active_by_dedup_key(user_id, item.dedup_key)
        if existing is not None:
            if not existing.is_read and (existing.title, existing.body) != (title, body):
                self._notifications.refresh_content(
                    existing.id, title=title, body=body, severity=item.severity
                )
            return False

        self._dispatcher.queue(
            user_id,
            title,
            item.severity,
            body,
            item.category,
            source_type=item.type,
            source_id=item.id,
            dedup_key=item.dedup_key,
        )
        return True

    def _collapse_duplicates(self, user_id: str) -> int:
        groups: dict[str, list[Notification]] = defaultdict(list)
        for notification in self._notifications.list_by_categories(user_id, URGENT_CATEGORIES):
            if notification.dedup_key:
                groups[notification.dedup_key].append(notification)

        duplicates: list[int] = []
        for group in groups.values():
            if len(group) <= 1:
                continue
            group.sort(key=_keep_order)
            duplicates.extend(n.id for n in group[1:] if n.id is not None)
        return self._notifications.soft_delete(duplicates, user_id=user_id)


def _keep_order(notification: Notification) -> tuple[bool, float, int]:
    """Sort key placing the reminder to keep first: unread, then newest."""

    created = notification.created_at.timestamp() if notification.created_at else 0.0
    return (notification.is_read, -created, -(notification.id or 0))


def _classify(due: date, now: datetime) -> tuple[int, str] | None:
    days = days_until(start_of_day(due, now.tzinfo), now)
    status = classify_days_until(days)
    if status is None:
        return None
    return days, status


def _loan_to_item(loan: LendBorrow, now: datetime) -> UrgentItem | None:
    if loan.due_date is None:
        return None
    classified = _classify(loan.due_date, now)
    if classified is None:
        return None
    days, status = classified
    amount = format_amount(loan.amount, loan.currency)
    if loan.is_lend():
        title = f"{loan.person_name} owes you {amount}"
        message = f"You lent {amount}"
    else:
        title = f"You owe {loan.person_name} {amount}"
        message = f"You borrowed {amount}"
    return UrgentItem(
        id=str(loan.id),
        type=URGENT_TYPE_LEND_BORROW,
        title=title,
        message=message,
        due_date=loan.due_date,
        days_until=days,
        status=status,
        amount=loan.amount,
        currency=loan.currency,
        person_name=loan.person_name,
        lend_borrow_type=loan.type,
    )


def _purchase_to_item(purchase: Purchase, now: datetime) -> UrgentItem | None:
    if purchase.planned_date is None:
        return None
    classified = _classify(purchase.planned_date, now)
    if classified is None:
        return None
    days, status = classified
    amount = format_amount(purchase.price, purchase.currency)
    return UrgentItem(
        id=str(purchase.id),
        type=URGENT_TYPE_PURCHASE,
        title=f"Planned purchase: {purchase.title} ({amount})",
        message=f"Planned to buy {purchase.title} for {amount}",
        due_date=purchase.planned_date,
        days_until=days,
        status=status,
        amount=purchase.price,
        currency=purchase.currency,
        item_name=purchase.title,
    )


__all__ = ["UrgentItemScanner"]
