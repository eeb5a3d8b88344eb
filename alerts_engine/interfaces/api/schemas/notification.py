"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class NotificationMarkReadRequest(BaseModel):
    """Payload used to mark a batch of notifications as read."""

    ids: list[int] = Field(..., min_length=1, description="Notification identifiers")

    def unique_ids(self) -> list[int]:
        """Return the list of identifiers without duplicates preserving order."""

        unique: list[int] = []
        seen: set[int] = set()
        for notification_id in self.ids:
            if notification_id in seen:
                continue
            seen.add(notification_id)
            unique.append(notification_id)
        return unique


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: int
    user_id: str
    title: str
    body: str | None = None
    severity: str
    category: str | None = None
    is_read: bool = False
    created_at: datetime
    read_at: datetime | None = None


class NotificationBatchResult(BaseModel):
    """Number of notifications affected by a bulk operation."""

    updated: int


__all__ = ["NotificationBatchResult", "NotificationMarkReadRequest", "NotificationRead"]
