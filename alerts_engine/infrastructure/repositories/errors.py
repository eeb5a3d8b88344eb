"""Error types raised by persistence adapters."""

from __future__ import annotations

from enum import Enum

from sqlalchemy.exc import IntegrityError, NoResultFound, SQLAlchemyError


class StoreErrorReason(str, Enum):
    """Distinguishable reasons for a failed store operation."""

    NOT_FOUND = "not_found"
    MISSING_TABLE = "missing_table"
    PERMISSION_DENIED = "permission_denied"
    UNIQUE_CONFLICT = "unique_conflict"
    OTHER = "other"


class PreferenceStoreError(Exception):
    """Raised when the preference document store cannot complete an operation."""

    def __init__(self, reason: StoreErrorReason, message: str = "") -> None:
        super().__init__(message or reason.value)
        self.reason = reason


_MISSING_TABLE_MARKERS = ("no such table", "does not exist", "undefined table", "42p01")
_PERMISSION_MARKERS = ("permission denied", "insufficient privilege", "42501")
_UNIQUE_MARKERS = ("unique constraint", "duplicate key", "23505")


def classify_error(exc: SQLAlchemyError) -> StoreErrorReason:
    """Map a SQLAlchemy exception onto a :class:`StoreErrorReason`."""

    if isinstance(exc, NoResultFound):
        return StoreErrorReason.NOT_FOUND

    orig = getattr(exc, "orig", None)
    pgcode = str(getattr(orig, "pgcode", "") or "").lower()
    text = f"{pgcode} {orig if orig is not None else exc}".lower()

    if any(marker in text for marker in _MISSING_TABLE_MARKERS):
        return StoreErrorReason.MISSING_TABLE
    if any(marker in text for marker in _PERMISSION_MARKERS):
        return StoreErrorReason.PERMISSION_DENIED
    if isinstance(exc, IntegrityError) or any(marker in text for marker in _UNIQUE_MARKERS):
        return StoreErrorReason.UNIQUE_CONFLICT
    return StoreErrorReason.OTHER


__all__ = ["PreferenceStoreError", "StoreErrorReason", "classify_error"]
