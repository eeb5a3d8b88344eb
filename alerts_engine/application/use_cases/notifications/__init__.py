"""Notification preferences, dispatch and urgent item scanning."""

from .dispatcher import NotificationDispatcher, ToastSink, build_digest
from .factory import NotificationEngine, build_notification_engine, create_engine_state
from .preferences import CATEGORY_PREFERENCE_MAP, PreferenceRepository, SessionProvider
from .state import EngineState, NotificationQueue, ScanThrottle
from .urgent_scanner import UrgentItemScanner

__all__ = [
    "CATEGORY_PREFERENCE_MAP",
    "EngineState",
    "NotificationDispatcher",
    "NotificationEngine",
    "NotificationQueue",
    "PreferenceRepository",
    "ScanThrottle",
    "SessionProvider",
    "ToastSink",
    "UrgentItemScanner",
    "build_digest",
    "build_notification_engine",
    "create_engine_state",
]
