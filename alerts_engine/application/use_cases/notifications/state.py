"""Process-lifetime state shared by the dispatcher and the urgent item scanner."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Deque

from alerts_engine.domain.entities import QueuedNotification

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class NotificationQueue:
    """Pending notification requests, one bounded FIFO per user.

    When a user's FIFO is full, that user's oldest request is dropped.
    Requests that carry a ``dedup_key`` replace a pending request of the same
    user and key.
    """

    def __init__(self, limit: int = 500) -> None:
        if limit <= 0:
            raise ValueError("Queue limit must be positive")
        self._limit = limit
        self._pending: dict[str, Deque[QueuedNotification]] = {}

    def __len__(self) -> int:
        return sum(len(items) for items in self._pending.values())

    @property
    def limit(self) -> int:
        return self._limit

    def users(self) -> list[str]:
        """Return the users with pending requests, in first-queued order."""

        return list(self._pending)

    def append(self, item: QueuedNotification) -> None:
        items = self._pending.setdefault(item.user_id, deque())
        if item.dedup_key:
            for index, pending in enumerate(items):
                if pending.dedup_key == item.dedup_key:
                    items[index] = item
                    return

        if len(items) >= self._limit:
            dropped = items.popleft()
            logger.warning(
                "Notification queue full (%s); dropping request %s for user %s",
                self._limit,
                dropped.request_id,
                dropped.user_id,
            )
        items.append(item)

    def drain(self) -> list[QueuedNotification]:
        """Remove and return every pending request of every user."""

        items = [item for pending in self._pending.values() for item in pending]
        self._pending.clear()
        return items

    def take_for_user(self, user_id: str) -> list[QueuedNotification]:
        """Remove and return the pending requests of ``user_id``."""

        return list(self._pending.pop(user_id, ()))

    def pending_for_user(self, user_id: str) -> list[QueuedNotification]:
        return list(self._pending.get(user_id, ()))


@dataclass
class ScanThrottle:
    """Per-user record of the last urgent item scan."""

    interval: timedelta = timedelta(hours=1)
    _last_check: dict[str, datetime] = field(default_factory=dict)

    def last_check(self, user_id: str) -> datetime:
        return self._last_check.get(user_id, EPOCH)

    def try_acquire(self, user_id: str, now: datetime) -> bool:
        """Record a scan at ``now`` unless the previous one is too recent."""

        if now - self.last_check(user_id) < self.interval:
            return False
        self._last_check[user_id] = now
        return True

    def reset(self, user_id: str) -> None:
        self._last_check[user_id] = EPOCH


@dataclass
class EngineState:
    """Objects whose lifetime follows the hosting application."""

    queue: NotificationQueue
    throttle: ScanThrottle


__all__ = ["EPOCH", "EngineState", "NotificationQueue", "ScanThrottle"]
