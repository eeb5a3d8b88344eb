"""Domain entities exposed by the application."""

from .auth_session import AuthSession
from .lend_borrow import (
    LEND_BORROW_OPEN_STATUSES,
    LEND_BORROW_STATUS_ACTIVE,
    LEND_BORROW_STATUS_CANCELLED,
    LEND_BORROW_STATUS_OVERDUE,
    LEND_BORROW_STATUS_SETTLED,
    LEND_BORROW_TYPE_BORROW,
    LEND_BORROW_TYPE_LEND,
    LendBorrow,
)
from .notification import (
    SEVERITIES,
    SEVERITY_ERROR,
    SEVERITY_INFO,
    SEVERITY_WARNING,
    Notification,
    QueuedNotification,
    ToastEvent,
)
from .notification_preferences import (
    FREQUENCY_DAILY_DIGEST,
    FREQUENCY_REAL_TIME,
    FREQUENCY_WEEKLY_SUMMARY,
    PREFERENCE_KEY,
    ActivityPreferences,
    CommunicationPreferences,
    FinancialPreferences,
    FrequencyPreferences,
    NotificationPreferences,
    SystemPreferences,
    default_preferences,
    section_of,
)
from .purchase import (
    PURCHASE_STATUS_CANCELLED,
    PURCHASE_STATUS_PLANNED,
    PURCHASE_STATUS_PURCHASED,
    Purchase,
)
from .urgent_item import (
    URGENCY_MARKERS,
    URGENT_CATEGORIES,
    URGENT_STATUS_DUE_SOON,
    URGENT_STATUS_OVERDUE,
    URGENT_STATUS_UPCOMING,
    URGENT_TYPE_LEND_BORROW,
    URGENT_TYPE_PURCHASE,
    UrgentItem,
    classify_days_until,
    days_until,
    describe_time_remaining,
)

__all__ = [
    "AuthSession",
    "LendBorrow",
    "LEND_BORROW_OPEN_STATUSES",
    "LEND_BORROW_STATUS_ACTIVE",
    "LEND_BORROW_STATUS_CANCELLED",
    "LEND_BORROW_STATUS_OVERDUE",
    "LEND_BORROW_STATUS_SETTLED",
    "LEND_BORROW_TYPE_BORROW",
    "LEND_BORROW_TYPE_LEND",
    "Notification",
    "QueuedNotification",
    "ToastEvent",
    "SEVERITIES",
    "SEVERITY_ERROR",
    "SEVERITY_INFO",
    "SEVERITY_WARNING",
    "ActivityPreferences",
    "CommunicationPreferences",
    "FinancialPreferences",
    "FrequencyPreferences",
    "NotificationPreferences",
    "SystemPreferences",
    "FREQUENCY_DAILY_DIGEST",
    "FREQUENCY_REAL_TIME",
    "FREQUENCY_WEEKLY_SUMMARY",
    "PREFERENCE_KEY",
    "default_preferences",
    "section_of",
    "Purchase",
    "PURCHASE_STATUS_CANCELLED",
    "PURCHASE_STATUS_PLANNED",
    "PURCHASE_STATUS_PURCHASED",
    "UrgentItem",
    "URGENCY_MARKERS",
    "URGENT_CATEGORIES",
    "URGENT_STATUS_DUE_SOON",
    "URGENT_STATUS_OVERDUE",
    "URGENT_STATUS_UPCOMING",
    "URGENT_TYPE_LEND_BORROW",
    "URGENT_TYPE_PURCHASE",
    "classify_days_until",
    "days_until",
    "describe_time_remaining",
]
