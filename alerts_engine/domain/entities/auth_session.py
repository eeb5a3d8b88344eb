"""Domain entity describing the authenticated session of the current user."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AuthSession:
    """Identity resolved from the session token."""

    user_id: str
    expires_at: datetime | None = None


__all__ = ["AuthSession"]
