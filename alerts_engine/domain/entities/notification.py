"""Domain entities representing user notifications and toast events."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Final

SEVERITY_INFO: Final[str] = "info"
SEVERITY_WARNING: Final[str] = "warning"
SEVERITY_ERROR: Final[str] = "error"

SEVERITIES: Final[tuple[str, ...]] = (SEVERITY_INFO, SEVERITY_WARNING, SEVERITY_ERROR)


@dataclass
class Notification:
    """Message persisted for a specific user."""

    id: int | None
    user_id: str
    title: str
    body: str | None = None
    severity: str = SEVERITY_INFO
    category: str | None = None
    source_type: str | None = None
    source_id: str | None = None
    dedup_key: str | None = None
    is_read: bool = False
    deleted: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    read_at: datetime | None = None


@dataclass(frozen=True)
class ToastEvent:
    """User-visible event pushed to connected clients."""

    user_id: str
    title: str
    body: str | None
    severity: str
    notification_id: int | None = None


@dataclass
class QueuedNotification:
    """Notification request waiting in the dispatcher queue."""

    request_id: str
    user_id: str
    title: str
    severity: str
    body: str | None
    category: str | None
    queued_at: datetime
    source_type: str | None = None
    source_id: str | None = None
    dedup_key: str | None = None


__all__ = [
    "Notification",
    "QueuedNotification",
    "ToastEvent",
    "SEVERITIES",
    "SEVERITY_ERROR",
    "SEVERITY_INFO",
    "SEVERITY_WARNING",
]
