"""Aggregate application use cases."""

from .notifications import (
    NotificationDispatcher,
    PreferenceRepository,
    UrgentItemScanner,
    build_notification_engine,
    create_engine_state,
)

__all__ = [
    "NotificationDispatcher",
    "PreferenceRepository",
    "UrgentItemScanner",
    "build_notification_engine",
    "create_engine_state",
]
