"""Token helpers and the session provider used to authorize preference writes."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from alerts_engine.config import get_settings
from alerts_engine.domain.entities import AuthSession

logger = logging.getLogger(__name__)

_ALGORITHM = "HS256"


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    return jwt.encode({**data, "exp": expire}, settings.secret_key, algorithm=_ALGORITHM)


def decode_access_token(token: str, *, verify_exp: bool = True) -> dict:
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[_ALGORITHM],
            options={"verify_exp": verify_exp},
        )
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc


def refresh_access_token(token: str) -> str:
    """Return a new token with the same claims and a renewed expiration."""

    payload = decode_access_token(token, verify_exp=False)
    payload.pop("exp", None)
    return create_access_token(payload)


class TokenSessionProvider:
    """Resolve the current session from a bearer token.

    ``refresh_session`` re-issues the token even when it has just expired, which
    is what lets a save that failed on an expired token be retried once.
    """

    def __init__(self, token: str | None) -> None:
        self._token = token

    @property
    def token(self) -> str | None:
        return self._token

    def get_session(self) -> AuthSession | None:
        if not self._token:
            return None
        try:
            payload = jwt.decode(
                self._token,
                get_settings().secret_key,
                algorithms=[_ALGORITHM],
            )
        except ExpiredSignatureError:
            logger.info("Session token expired")
            return None
        except JWTError as exc:
            logger.warning("Invalid session token: %s", exc)
            return None

        user_id = payload.get("sub")
        if not user_id:
            return None
        expires = payload.get("exp")
        expires_at = (
            datetime.fromtimestamp(expires, tz=timezone.utc)
            if isinstance(expires, (int, float))
            else None
        )
        return AuthSession(user_id=str(user_id), expires_at=expires_at)

    def refresh_session(self) -> bool:
        if not self._token:
            return False
        try:
            self._token = refresh_access_token(self._token)
        except ValueError as exc:
            logger.warning("Could not refresh session: %s", exc)
            return False
        return True


__all__ = [
    "TokenSessionProvider",
    "create_access_token",
    "decode_access_token",
    "refresh_access_token",
]
