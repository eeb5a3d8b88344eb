"""Shared fixtures for the alerts engine test-suite."""

from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["APP_TIMEZONE"] = "UTC"

from alerts_engine.domain.entities import AuthSession  # noqa: E402

USER_ID = "user-1"


class FakeSessions:
    """Session provider returning a fixed identity."""

    def __init__(self, user_id: str | None = USER_ID, *, refresh_succeeds: bool = True) -> None:
        self.user_id = user_id
        self.refresh_succeeds = refresh_succeeds
        self.refreshes = 0

    def get_session(self) -> AuthSession | None:
        if self.user_id is None:
            return None
        return AuthSession(user_id=self.user_id)

    def refresh_session(self) -> bool:
        self.refreshes += 1
        return self.refresh_succeeds


class RecordingPublisher:
    """Toast sink remembering every published event."""

    def __init__(self) -> None:
        self.events = []

    def publish(self, event) -> None:
        self.events.append(event)


class FixedClock:
    """Callable clock that tests can move forward explicitly."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture()
def db_session():
    """Yield a session bound to a freshly created in-memory schema."""

    from alerts_engine.infrastructure import database, models  # noqa: F401

    database.Base.metadata.create_all(bind=database.engine)
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()
        database.Base.metadata.drop_all(bind=database.engine)


@pytest.fixture()
def sessions() -> FakeSessions:
    return FakeSessions()


@pytest.fixture()
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc))


@pytest.fixture()
def engine_state():
    from alerts_engine.application.use_cases.notifications import create_engine_state

    return create_engine_state()


@pytest.fixture()
def notification_engine(db_session, sessions, publisher, clock, engine_state):
    """Return the notification components wired around ``db_session``."""

    from alerts_engine.application.use_cases.notifications import build_notification_engine

    return build_notification_engine(
        db_session,
        sessions=sessions,
        state=engine_state,
        publisher=publisher,
        clock=clock,
    )
