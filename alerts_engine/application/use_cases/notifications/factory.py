"""Assemble the notification components around a database session."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from sqlalchemy.orm import Session

from alerts_engine.config import Settings, get_settings
from alerts_engine.infrastructure.repositories import (
    LendBorrowRepository,
    NotificationRepository,
    PreferenceDocumentStore,
    PurchaseRepository,
)
from alerts_engine.utils import now_in_app_timezone

from .dispatcher import NotificationDispatcher, ToastSink
from .preferences import PreferenceRepository, SessionProvider
from .state import EngineState, NotificationQueue, ScanThrottle
from .urgent_scanner import UrgentItemScanner


@dataclass
class NotificationEngine:
    """Request-scoped view over the long-lived :class:`EngineState`."""

    preferences: PreferenceRepository
    notifications: NotificationRepository
    dispatcher: NotificationDispatcher
    scanner: UrgentItemScanner


def create_engine_state(settings: Settings | None = None) -> EngineState:
    """Build the queue and throttle that live as long as the application."""

    settings = settings or get_settings()
    return EngineState(
        queue=NotificationQueue(limit=settings.notification_queue_limit),
        throttle=ScanThrottle(
            interval=timedelta(minutes=settings.urgent_scan_interval_minutes)
        ),
    )


def build_notification_engine(
    session: Session,
    *,
    sessions: SessionProvider,
    state: EngineState,
    publisher: ToastSink,
    settings: Settings | None = None,
    clock: Callable[[], datetime] = now_in_app_timezone,
) -> NotificationEngine:
    settings = settings or get_settings()
    preferences = PreferenceRepository(PreferenceDocumentStore(session), sessions)
    notifications = NotificationRepository(session)
    dispatcher = NotificationDispatcher(
        preferences=preferences,
        notifications=notifications,
        publisher=publisher,
        queue=state.queue,
        clock=clock,
    )
    scanner = UrgentItemScanner(
        loans=LendBorrowRepository(session),
        purchases=PurchaseRepository(session),
        notifications=notifications,
        dispatcher=dispatcher,
        throttle=state.throttle,
        max_notifications=settings.urgent_max_notifications,
        clock=clock,
    )
    return NotificationEngine(
        preferences=preferences,
        notifications=notifications,
        dispatcher=dispatcher,
        scanner=scanner,
    )


__all__ = ["NotificationEngine", "build_notification_engine", "create_engine_state"]
