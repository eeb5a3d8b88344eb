"""Queue notification requests and deliver them according to user preferences."""

from __future__ import annotations

import logging
import uuid
from collections import Counter
from datetime import datetime
from typing import Callable, Final, Iterable, Protocol

from sqlalchemy.exc import SQLAlchemyError

from alerts_engine.domain.entities import (
    FREQUENCY_DAILY_DIGEST,
    FREQUENCY_REAL_TIME,
    FREQUENCY_WEEKLY_SUMMARY,
    SEVERITY_INFO,
    Notification,
    QueuedNotification,
    ToastEvent,
)
from alerts_engine.domain.quiet_hours import is_suppressed
from alerts_engine.infrastructure.repositories import NotificationRepository
from alerts_engine.utils import now_in_app_timezone

from .preferences import CATEGORY_PREFERENCE_MAP, PreferenceRepository
from .state import NotificationQueue

logger = logging.getLogger(__name__)

_DIGEST_TITLES: Final[dict[str, str]] = {
    FREQUENCY_DAILY_DIGEST: "Daily Digest",
    FREQUENCY_WEEKLY_SUMMARY: "Weekly Summary",
}
_DIGEST_INTROS: Final[dict[str, str]] = {
    FREQUENCY_DAILY_DIGEST: "Summary of today's activities:",
    FREQUENCY_WEEKLY_SUMMARY: "Summary of this week's activities:",
}
_DIGEST_GROUPS: Final[tuple[tuple[str, str], ...]] = (
    ("financial", "💰 {count} financial alert{plural}"),
    ("system", "⚙️ {count} system update{plural}"),
    ("activity", "📊 {count} activity notification{plural}"),
)


class ToastSink(Protocol):
    """Receiver of user-visible toast events."""

    def publish(self, event: ToastEvent) -> None: ...


class NotificationDispatcher:
    """Decide whether and when queued notifications are delivered.

    Delivery is at-most-once: a request that cannot be persisted is logged and
    dropped, never retried.
    """

    def __init__(
        self,
        *,
        preferences: PreferenceRepository,
        notifications: NotificationRepository,
        publisher: ToastSink,
        queue: NotificationQueue,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self._preferences = preferences
        self._notifications = notifications
        self._publisher = publisher
        self._queue = queue
        self._clock = clock

    def queue(
        self,
        user_id: str,
        title: str,
        severity: str = SEVERITY_INFO,
        body: str | None = None,
        category: str | None = None,
        *,
        source_type: str | None = None,
        source_id: str | None = None,
        dedup_key: str | None = None,
    ) -> None:
        self._queue.append(
            QueuedNotification(
                request_id=uuid.uuid4().hex,
                user_id=user_id,
                title=title,
                severity=severity,
                body=body,
                category=category,
                queued_at=self._clock(),
                source_type=source_type,
                source_id=source_id,
                dedup_key=dedup_key,
            )
        )
        self.process_queue(user_id)

    def queue_financial(
        self,
        user_id: str,
        title: str,
        severity: str = SEVERITY_INFO,
        body: str | None = None,
        category: str = "overdue",
    ) -> None:
        self.queue(user_id, title, severity, body, category)

    def queue_system(
        self,
        user_id: str,
        title: str,
        severity: str = SEVERITY_INFO,
        body: str | None = None,
        category: str = "new_feature",
    ) -> None:
        self.queue(user_id, title, severity, body, category)

    def queue_activity(
        self,
        user_id: str,
        title: str,
        severity: str = SEVERITY_INFO,
        body: str | None = None,
        category: str = "account_change",
    ) -> None:
        self.queue(user_id, title, severity, body, category)

    def process_queue(self, user_id: str | None = None) -> None:
        """Deliver pending requests of users whose cadence is real time.

        Only ``user_id`` is processed when given; otherwise every user with
        pending requests is, each against their own cadence.
        """

        users = [user_id] if user_id is not None else self._queue.users()
        for current in users:
            pending = self._queue.pending_for_user(current)
            if not pending:
                continue

            cadence = self._preferences.get(current).frequency.effective()
            if cadence != FREQUENCY_REAL_TIME:
                logger.debug(
                    "Holding %s queued notification(s) of user %s for %s delivery",
                    len(pending),
                    current,
                    cadence,
                )
                continue

            for item in self._queue.take_for_user(current):
                self._deliver(item)

    def take_pending(self, user_id: str) -> list[QueuedNotification]:
        """Hand the user's batched requests over to a digest job."""

        return self._queue.take_for_user(user_id)

    def flush_digest(self, user_id: str) -> Notification | None:
        """Collapse the user's pending requests into one summary notification."""

        preferences = self._preferences.get(user_id)
        cadence = preferences.frequency.effective()
        if cadence == FREQUENCY_REAL_TIME:
            cadence = FREQUENCY_DAILY_DIGEST

        pending = [
            item
            for item in self.take_pending(user_id)
            if item.category is None
            or self._preferences.should_send_category(preferences, item.category)
        ]
        if not pending:
            return None

        title, body = build_digest(pending, cadence)
        return self._persist_and_publish(
            Notification(
                id=None,
                user_id=user_id,
                title=title,
                body=body,
                severity=SEVERITY_INFO,
                category=None,
                created_at=self._clock(),
            ),
            quiet=is_suppressed(preferences, self._clock()),
        )

    def _deliver(self, item: QueuedNotification) -> None:
        preferences = self._preferences.get(item.user_id)
        if item.category is not None and not self._preferences.should_send_category(
            preferences, item.category
        ):
            logger.info(
                "Notification %s blocked by preferences for category %s",
                item.request_id,
                item.category,
            )
            return

        self._persist_and_publish(
            Notification(
                id=None,
                user_id=item.user_id,
                title=item.title,
                body=item.body,
                severity=item.severity,
                category=item.category,
                source_type=item.source_type,
                source_id=item.source_id,
                dedup_key=item.dedup_key,
                created_at=item.queued_at,
            ),
            quiet=is_suppressed(preferences, self._clock()),
        )

    def _persist_and_publish(
        self, notification: Notification, *, quiet: bool
    ) -> Notification | None:
        try:
            saved = self._notifications.create(notification)
        except SQLAlchemyError as exc:
            self._notifications.session.rollback()
            logger.error(
                "Dropping notification %r for user %s: %s",
                notification.title,
                notification.user_id,
                exc,
            )
            return None

        if quiet:
            logger.debug("Quiet hours active for user %s; toast suppressed", saved.user_id)
            return saved

        try:
            self._publisher.publish(
                ToastEvent(
                    user_id=saved.user_id,
                    title=saved.title,
                    body=saved.body,
                    severity=saved.severity,
                    notification_id=saved.id,
                )
            )
        except Exception as exc:  # pragma: no cover - delivery is best effort
            logger.warning("Toast delivery failed for user %s: %s", saved.user_id, exc)
        return saved


def build_digest(items: Iterable[QueuedNotification], cadence: str) -> tuple[str, str]:
    """Return the title and body summarizing ``items`` for ``cadence``."""

    items = list(items)
    total = len(items)
    label = _DIGEST_TITLES.get(cadence, _DIGEST_TITLES[FREQUENCY_DAILY_DIGEST])
    title = f"{label}: {total} notification{'s' if total != 1 else ''}"

    counts: Counter[str] = Counter()
    for item in items:
        mapping = CATEGORY_PREFERENCE_MAP.get(item.category or "")
        if mapping is not None:
            counts[mapping[0]] += 1

    lines = [_DIGEST_INTROS.get(cadence, _DIGEST_INTROS[FREQUENCY_DAILY_DIGEST])]
    for group, template in _DIGEST_GROUPS:
        count = counts[group]
        if count:
            lines.append(template.format(count=count, plural="s" if count != 1 else ""))
    uncategorized = total - sum(counts.values())
    if uncategorized:
        lines.append(f"🔔 {uncategorized} other notification{'s' if uncategorized != 1 else ''}")
    return title, "\n".join(lines)


__all__ = ["NotificationDispatcher", "ToastSink", "build_digest"]
