"""ORM models used by the application infrastructure."""

from .lend_borrow import LendBorrowModel
from .notification import NotificationModel
from .notification_preference import NotificationPreferenceModel
from .purchase import PurchaseModel

__all__ = [
    "LendBorrowModel",
    "NotificationModel",
    "NotificationPreferenceModel",
    "PurchaseModel",
]
