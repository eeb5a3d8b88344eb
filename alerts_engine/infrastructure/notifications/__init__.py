"""Realtime notification helpers for the infrastructure layer."""

from .manager import NotificationConnectionManager, notification_manager
from .publisher import (
    ToastPublisher,
    serialize_notification,
    serialize_toast,
    toast_publisher,
)

__all__ = [
    "NotificationConnectionManager",
    "notification_manager",
    "ToastPublisher",
    "toast_publisher",
    "serialize_notification",
    "serialize_toast",
]
