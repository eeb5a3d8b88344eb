from .notification import (
    NotificationBatchResult,
    NotificationMarkReadRequest,
    NotificationRead,
)
from .preferences import NotificationPreferencesSchema, PreferenceValueUpdate
from .urgent import ScanResult, UrgentItemRead

__all__ = [
    "NotificationBatchResult",
    "NotificationMarkReadRequest",
    "NotificationPreferencesSchema",
    "NotificationRead",
    "PreferenceValueUpdate",
    "ScanResult",
    "UrgentItemRead",
]
