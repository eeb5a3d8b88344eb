"""Repository implementations for infrastructure layer."""

from .errors import PreferenceStoreError, StoreErrorReason, classify_error
from .lend_borrow_repository import LendBorrowRepository
from .notification_repository import NotificationRepository
from .preference_store import PreferenceDocumentStore
from .purchase_repository import PurchaseRepository

__all__ = [
    "LendBorrowRepository",
    "NotificationRepository",
    "PreferenceDocumentStore",
    "PreferenceStoreError",
    "PurchaseRepository",
    "StoreErrorReason",
    "classify_error",
]
