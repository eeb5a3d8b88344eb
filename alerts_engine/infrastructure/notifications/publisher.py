"""Utility helpers to push toast events to websocket subscribers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from anyio import from_thread

from alerts_engine.domain.entities import Notification, ToastEvent

from .manager import NotificationConnectionManager, notification_manager

logger = logging.getLogger(__name__)


class ToastPublisher:
    """Serialize toast events and schedule their delivery."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager

    def publish(self, event: ToastEvent) -> None:
        """Schedule ``event`` to be delivered to its user."""

        if self._manager.connection_count(event.user_id) == 0:
            logger.debug("No open connection for user %s; toast kept in history only", event.user_id)
            return

        message = {"type": "toast", "data": serialize_toast(event)}
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run(self._manager.send_to_user, event.user_id, message)
            except RuntimeError as exc:
                # Not called from a worker thread of a running event loop.
                logger.debug("Toast for user %s not delivered: %s", event.user_id, exc)
        else:
            loop.create_task(self._manager.send_to_user(event.user_id, message))


def serialize_toast(event: ToastEvent) -> dict[str, Any]:
    """Return the websocket payload representation for ``event``."""

    return {
        "title": event.title,
        "body": event.body,
        "severity": event.severity,
        "notification_id": event.notification_id,
    }


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``."""

    return {
        "id": notification.id,
        "user_id": notification.user_id,
        "title": notification.title,
        "body": notification.body,
        "severity": notification.severity,
        "category": notification.category,
        "is_read": notification.is_read,
        "created_at": notification.created_at.isoformat()
        if notification.created_at
        else None,
        "read_at": notification.read_at.isoformat() if notification.read_at else None,
    }


toast_publisher = ToastPublisher(notification_manager)


__all__ = [
    "ToastPublisher",
    "serialize_notification",
    "serialize_toast",
    "toast_publisher",
]
