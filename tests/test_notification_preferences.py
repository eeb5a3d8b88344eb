"""Tests for the notification preference document entity."""

import pytest

from alerts_engine.domain.entities import (
    FREQUENCY_DAILY_DIGEST,
    FREQUENCY_REAL_TIME,
    FREQUENCY_WEEKLY_SUMMARY,
    FrequencyPreferences,
    NotificationPreferences,
    default_preferences,
)


def test_defaults_match_documented_values():
    preferences = default_preferences()

    assert all(preferences.to_document()["financial"].values())
    assert preferences.system.tips_guidance is False
    assert preferences.system.security_alerts is True
    assert preferences.activity.transaction_confirmations is False
    assert preferences.activity.backup_reminders is True
    assert preferences.communication.in_app_notifications is True
    assert preferences.communication.quiet_hours_enabled is False
    assert preferences.communication.quiet_hours_start == "22:00"
    assert preferences.communication.quiet_hours_end == "08:00"
    assert preferences.frequency.effective() == FREQUENCY_REAL_TIME


@pytest.mark.parametrize("document", [None, {}, {"financial": None}, {"financial": []}, "legacy"])
def test_empty_or_invalid_documents_yield_defaults(document):
    assert NotificationPreferences.from_document(document) == default_preferences()


def test_partial_section_is_merged_key_by_key():
    preferences = NotificationPreferences.from_document(
        {"financial": {"overdue_payments": False}, "communication": {"quiet_hours_enabled": True}}
    )

    assert preferences.financial.overdue_payments is False
    assert preferences.financial.due_soon_reminders is True
    assert preferences.communication.quiet_hours_enabled is True
    assert preferences.communication.quiet_hours_start == "22:00"
    assert preferences.system == default_preferences().system


def test_wrong_types_and_unknown_keys_are_ignored():
    preferences = NotificationPreferences.from_document(
        {
            "financial": {"overdue_payments": "no", "unknown_flag": False},
            "communication": {"quiet_hours_start": 2200},
            "legacy_section": {"anything": True},
        }
    )

    assert preferences == default_preferences()


def test_document_round_trips_through_storage_format():
    preferences = default_preferences().with_value("system", "tips_guidance", True)

    assert NotificationPreferences.from_document(preferences.to_document()) == preferences


def test_with_value_rejects_unknown_fields_and_wrong_types():
    preferences = default_preferences()

    with pytest.raises(KeyError):
        preferences.with_value("financial", "unknown", True)
    with pytest.raises(KeyError):
        preferences.with_value("marketing", "emails", True)
    with pytest.raises(TypeError):
        preferences.with_value("financial", "overdue_payments", "false")


def test_with_value_returns_a_new_document():
    preferences = default_preferences()
    updated = preferences.with_value("communication", "quiet_hours_start", "23:30")

    assert updated.communication.quiet_hours_start == "23:30"
    assert preferences.communication.quiet_hours_start == "22:00"


@pytest.mark.parametrize(
    ("flags", "expected"),
    [
        ({"real_time": True, "daily_digest": True, "weekly_summary": True}, FREQUENCY_REAL_TIME),
        ({"real_time": False, "daily_digest": True, "weekly_summary": True}, FREQUENCY_DAILY_DIGEST),
        ({"real_time": False, "daily_digest": False, "weekly_summary": True}, FREQUENCY_WEEKLY_SUMMARY),
        ({"real_time": False, "daily_digest": False, "weekly_summary": False}, FREQUENCY_REAL_TIME),
    ],
)
def test_frequency_priority(flags, expected):
    assert FrequencyPreferences(**flags).effective() == expected
