"""Tests for preference-aware notification delivery."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.exc import OperationalError

from alerts_engine.application.use_cases.notifications import (
    NotificationDispatcher,
    NotificationQueue,
    build_digest,
)
from alerts_engine.domain.entities import (
    CommunicationPreferences,
    FinancialPreferences,
    FrequencyPreferences,
    NotificationPreferences,
    QueuedNotification,
)

from conftest import USER_ID, FakeSessions

DIGEST_USER_ID = "user-2"


def _save(engine, **sections) -> None:
    assert engine.preferences.save(USER_ID, NotificationPreferences(**sections)) is True


def test_real_time_notification_is_persisted_and_toasted(notification_engine, publisher):
    notification_engine.dispatcher.queue_financial(
        USER_ID, "Low balance", "warning", "Checking is below $10.00", category="low_balance"
    )

    [notification] = notification_engine.notifications.list_for_user(USER_ID)
    assert notification.title == "Low balance"
    assert notification.category == "low_balance"
    assert notification.severity == "warning"
    assert [event.notification_id for event in publisher.events] == [notification.id]


def test_disabled_category_is_not_delivered(notification_engine, publisher):
    _save(notification_engine, financial=FinancialPreferences(low_balance_alerts=False))

    notification_engine.dispatcher.queue_financial(USER_ID, "Low balance", category="low_balance")

    assert notification_engine.notifications.count_for_user(USER_ID) == 0
    assert publisher.events == []


def test_unknown_category_is_not_delivered(notification_engine):
    notification_engine.dispatcher.queue(USER_ID, "Promo", category="promotion")

    assert notification_engine.notifications.count_for_user(USER_ID) == 0


def test_uncategorized_notification_is_always_delivered(notification_engine):
    notification_engine.dispatcher.queue(USER_ID, "Welcome back")

    assert notification_engine.notifications.count_for_user(USER_ID) == 1


def test_system_and_activity_shortcuts_use_their_default_categories(notification_engine):
    notification_engine.dispatcher.queue_system(USER_ID, "Dark mode is here")
    notification_engine.dispatcher.queue_activity(USER_ID, "Email changed")

    categories = {n.category for n in notification_engine.notifications.list_for_user(USER_ID)}
    assert categories == {"new_feature", "account_change"}


def test_quiet_hours_persist_without_toast(notification_engine, publisher, clock):
    _save(
        notification_engine,
        communication=CommunicationPreferences(
            quiet_hours_enabled=True, quiet_hours_start="22:00", quiet_hours_end="08:00"
        ),
    )
    clock.now = datetime(2026, 3, 10, 23, 0, tzinfo=timezone.utc)

    notification_engine.dispatcher.queue_financial(USER_ID, "Payment overdue")

    assert notification_engine.notifications.count_for_user(USER_ID) == 1
    assert publisher.events == []


def test_daily_digest_holds_notifications_until_flushed(notification_engine, publisher, engine_state):
    _save(notification_engine, frequency=FrequencyPreferences(real_time=False, daily_digest=True))

    notification_engine.dispatcher.queue_financial(USER_ID, "Payment overdue")

    assert notification_engine.notifications.count_for_user(USER_ID) == 0
    assert len(engine_state.queue) == 1

    digest = notification_engine.dispatcher.flush_digest(USER_ID)

    assert digest is not None
    assert digest.title == "Daily Digest: 1 notification"
    assert "1 financial alert" in digest.body
    assert len(engine_state.queue) == 0
    assert notification_engine.notifications.count_for_user(USER_ID) == 1
    assert len(publisher.events) == 1


def test_weekly_summary_groups_pending_notifications(notification_engine):
    _save(notification_engine, frequency=FrequencyPreferences(real_time=False, weekly_summary=True))

    notification_engine.dispatcher.queue_financial(USER_ID, "Payment overdue")
    notification_engine.dispatcher.queue_system(USER_ID, "New feature")

    digest = notification_engine.dispatcher.flush_digest(USER_ID)

    assert digest.title == "Weekly Summary: 2 notifications"
    assert "1 financial alert" in digest.body
    assert "1 system update" in digest.body


def test_flush_digest_without_pending_requests(notification_engine):
    assert notification_engine.dispatcher.flush_digest(USER_ID) is None
    assert notification_engine.notifications.count_for_user(USER_ID) == 0


def test_take_pending_hands_requests_over(notification_engine):
    _save(notification_engine, frequency=FrequencyPreferences(real_time=False, daily_digest=True))
    notification_engine.dispatcher.queue_activity(USER_ID, "Backup finished", category="backup_reminder")

    [pending] = notification_engine.dispatcher.take_pending(USER_ID)

    assert pending.title == "Backup finished"
    assert notification_engine.dispatcher.take_pending(USER_ID) == []


class _FailingSession:
    def __init__(self) -> None:
        self.rollbacks = 0

    def rollback(self) -> None:
        self.rollbacks += 1


class _FailingNotifications:
    def __init__(self) -> None:
        self.session = _FailingSession()

    def create(self, notification):
        raise OperationalError("INSERT", {}, Exception("database is locked"))


def test_persistence_failure_drops_the_notification(notification_engine, publisher, clock):
    notifications = _FailingNotifications()
    dispatcher = NotificationDispatcher(
        preferences=notification_engine.preferences,
        notifications=notifications,
        publisher=publisher,
        queue=NotificationQueue(),
        clock=clock,
    )

    dispatcher.queue_financial(USER_ID, "Payment overdue")

    assert notifications.session.rollbacks == 1
    assert publisher.events == []


def test_build_digest_counts_by_section():
    now = datetime(2026, 3, 10, tzinfo=timezone.utc)
    items = [
        QueuedNotification("1", USER_ID, "A", "info", None, "overdue", now),
        QueuedNotification("2", USER_ID, "B", "info", None, "due_soon", now),
        QueuedNotification("3", USER_ID, "C", "info", None, "account_change", now),
        QueuedNotification("4", USER_ID, "D", "info", None, None, now),
    ]

    title, body = build_digest(items, "daily_digest")

    assert title == "Daily Digest: 4 notifications"
    assert body.splitlines() == [
        "Summary of today's activities:",
        "💰 2 financial alerts",
        "📊 1 activity notification",
        "🔔 1 other notification",
    ]


def _digest_user_engine(db_session, engine_state, publisher, clock):
    from alerts_engine.application.use_cases.notifications import build_notification_engine

    engine = build_notification_engine(
        db_session,
        sessions=FakeSessions(DIGEST_USER_ID),
        state=engine_state,
        publisher=publisher,
        clock=clock,
    )
    preferences = NotificationPreferences(
        frequency=FrequencyPreferences(real_time=False, daily_digest=True)
    )
    assert engine.preferences.save(DIGEST_USER_ID, preferences) is True
    return engine


def test_real_time_user_is_not_held_behind_a_digest_user(
    notification_engine, db_session, engine_state, publisher, clock
):
    digest_engine = _digest_user_engine(db_session, engine_state, publisher, clock)

    digest_engine.dispatcher.queue(DIGEST_USER_ID, "Weekly budget report")
    notification_engine.dispatcher.queue(USER_ID, "Card payment posted")

    assert notification_engine.notifications.count_for_user(USER_ID) == 1
    assert notification_engine.notifications.count_for_user(DIGEST_USER_ID) == 0
    assert len(engine_state.queue.pending_for_user(DIGEST_USER_ID)) == 1


def test_digest_user_is_not_delivered_by_a_real_time_user(
    notification_engine, db_session, engine_state, publisher, clock
):
    digest_engine = _digest_user_engine(db_session, engine_state, publisher, clock)

    notification_engine.dispatcher.queue(USER_ID, "Card payment posted")
    digest_engine.dispatcher.queue(DIGEST_USER_ID, "Weekly budget report")
    notification_engine.dispatcher.process_queue()

    assert notification_engine.notifications.count_for_user(USER_ID) == 1
    assert notification_engine.notifications.count_for_user(DIGEST_USER_ID) == 0
    [pending] = engine_state.queue.pending_for_user(DIGEST_USER_ID)
    assert pending.title == "Weekly budget report"
