"""Domain entities describing a user's notification preferences."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any, Final

PREFERENCE_KEY: Final[str] = "notification_settings"

FREQUENCY_REAL_TIME: Final[str] = "real_time"
FREQUENCY_DAILY_DIGEST: Final[str] = "daily_digest"
FREQUENCY_WEEKLY_SUMMARY: Final[str] = "weekly_summary"


@dataclass(frozen=True)
class FinancialPreferences:
    """Alerts about money owed, budgets and balances."""

    overdue_payments: bool = True
    due_soon_reminders: bool = True
    upcoming_deadlines: bool = True
    low_balance_alerts: bool = True
    budget_exceeded: bool = True
    large_transactions: bool = True


@dataclass(frozen=True)
class SystemPreferences:
    """Product announcements and account security messages."""

    new_features: bool = True
    system_updates: bool = True
    tips_guidance: bool = False
    security_alerts: bool = True


@dataclass(frozen=True)
class ActivityPreferences:
    """Confirmations about the user's own activity."""

    transaction_confirmations: bool = False
    account_changes: bool = True
    category_updates: bool = False
    backup_reminders: bool = True


@dataclass(frozen=True)
class CommunicationPreferences:
    """Delivery channels and the quiet hours window (``HH:MM``, 24-hour)."""

    in_app_notifications: bool = True
    email_notifications: bool = False
    push_notifications: bool = False
    quiet_hours_enabled: bool = False
    quiet_hours_start: str = "22:00"
    quiet_hours_end: str = "08:00"


@dataclass(frozen=True)
class FrequencyPreferences:
    """Delivery cadence flags; several may be enabled at once."""

    real_time: bool = True
    daily_digest: bool = False
    weekly_summary: bool = False

    def effective(self) -> str:
        """Return the highest priority cadence that is enabled."""

        if self.real_time:
            return FREQUENCY_REAL_TIME
        if self.daily_digest:
            return FREQUENCY_DAILY_DIGEST
        if self.weekly_summary:
            return FREQUENCY_WEEKLY_SUMMARY
        return FREQUENCY_REAL_TIME


@dataclass(frozen=True)
class NotificationPreferences:
    """Singleton preference document stored for every user."""

    financial: FinancialPreferences = field(default_factory=FinancialPreferences)
    system: SystemPreferences = field(default_factory=SystemPreferences)
    activity: ActivityPreferences = field(default_factory=ActivityPreferences)
    communication: CommunicationPreferences = field(
        default_factory=CommunicationPreferences
    )
    frequency: FrequencyPreferences = field(default_factory=FrequencyPreferences)

    @classmethod
    def from_document(cls, document: Mapping[str, Any] | None) -> "NotificationPreferences":
        """Merge a stored (possibly partial or legacy) document over the defaults.

        Each section is merged key by key. Unknown sections and keys are ignored and
        values whose type differs from the default are replaced by the default.
        """

        defaults = cls()
        if not isinstance(document, Mapping):
            return defaults

        sections: dict[str, Any] = {}
        for section_field in fields(cls):
            default_section = getattr(defaults, section_field.name)
            stored_section = document.get(section_field.name)
            sections[section_field.name] = _merge_section(default_section, stored_section)
        return cls(**sections)

    def to_document(self) -> dict[str, dict[str, Any]]:
        """Return the JSON-serializable representation of the preferences."""

        return asdict(self)

    def with_value(self, category: str, key: str, value: Any) -> "NotificationPreferences":
        """Return a copy with ``category.key`` replaced by ``value``.

        Raises ``KeyError`` for unknown fields and ``TypeError`` when ``value`` does
        not match the type of the existing field.
        """

        section = section_of(self, category)
        if section is None or key not in _field_names(section):
            raise KeyError(f"{category}.{key}")
        current = getattr(section, key)
        if type(value) is not type(current):
            msg = f"{category}.{key} expects {type(current).__name__}"
            raise TypeError(msg)
        return replace(self, **{category: replace(section, **{key: value})})


def section_of(preferences: NotificationPreferences, category: str) -> Any | None:
    """Return the section named ``category`` or ``None`` when it is unknown."""

    if category not in _field_names(preferences):
        return None
    return getattr(preferences, category)


def default_preferences() -> NotificationPreferences:
    """Return the built-in default preference document."""

    return NotificationPreferences()


def _field_names(instance: Any) -> set[str]:
    return {item.name for item in fields(instance)}


def _merge_section(default_section: Any, stored_section: Any) -> Any:
    if not isinstance(stored_section, Mapping):
        return default_section

    overrides: dict[str, Any] = {}
    for item in fields(default_section):
        if item.name not in stored_section:
            continue
        value = stored_section[item.name]
        if type(value) is type(getattr(default_section, item.name)):
            overrides[item.name] = value
    return replace(default_section, **overrides)


__all__ = [
    "ActivityPreferences",
    "CommunicationPreferences",
    "FinancialPreferences",
    "FrequencyPreferences",
    "NotificationPreferences",
    "SystemPreferences",
    "FREQUENCY_DAILY_DIGEST",
    "FREQUENCY_REAL_TIME",
    "FREQUENCY_WEEKLY_SUMMARY",
    "PREFERENCE_KEY",
    "default_preferences",
    "section_of",
]
