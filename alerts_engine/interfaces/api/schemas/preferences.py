"""Pydantic models describing notification preference documents."""

from __future__ import annotations

from dataclasses import asdict
from typing import Annotated, Union

from pydantic import BaseModel, ConfigDict, Field

from alerts_engine.domain.entities import (
    ActivityPreferences,
    CommunicationPreferences,
    FinancialPreferences,
    FrequencyPreferences,
    NotificationPreferences,
    SystemPreferences,
)

TimeOfDay = Annotated[str, Field(pattern=r"^([01]?\d|2[0-3]):[0-5]\d$")]


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid")


class FinancialPreferencesSchema(_Section):
    overdue_payments: bool = True
    due_soon_reminders: bool = True
    upcoming_deadlines: bool = True
    low_balance_alerts: bool = True
    budget_exceeded: bool = True
    large_transactions: bool = True


class SystemPreferencesSchema(_Section):
    new_features: bool = True
    system_updates: bool = True
    tips_guidance: bool = False
    security_alerts: bool = True


class ActivityPreferencesSchema(_Section):
    transaction_confirmations: bool = False
    account_changes: bool = True
    category_updates: bool = False
    backup_reminders: bool = True


class CommunicationPreferencesSchema(_Section):
    in_app_notifications: bool = True
    email_notifications: bool = False
    push_notifications: bool = False
    quiet_hours_enabled: bool = False
    quiet_hours_start: TimeOfDay = "22:00"
    quiet_hours_end: TimeOfDay = "08:00"


class FrequencyPreferencesSchema(_Section):
    real_time: bool = True
    daily_digest: bool = False
    weekly_summary: bool = False


class NotificationPreferencesSchema(BaseModel):
    """Full preference document exchanged with the client."""

    model_config = ConfigDict(extra="forbid")

    financial: FinancialPreferencesSchema = Field(default_factory=FinancialPreferencesSchema)
    system: SystemPreferencesSchema = Field(default_factory=SystemPreferencesSchema)
    activity: ActivityPreferencesSchema = Field(default_factory=ActivityPreferencesSchema)
    communication: CommunicationPreferencesSchema = Field(
        default_factory=CommunicationPreferencesSchema
    )
    frequency: FrequencyPreferencesSchema = Field(default_factory=FrequencyPreferencesSchema)

    @classmethod
    def from_entity(cls, preferences: NotificationPreferences) -> "NotificationPreferencesSchema":
        return cls.model_validate(asdict(preferences))

    def to_entity(self) -> NotificationPreferences:
        return NotificationPreferences(
            financial=FinancialPreferences(**self.financial.model_dump()),
            system=SystemPreferences(**self.system.model_dump()),
            activity=ActivityPreferences(**self.activity.model_dump()),
            communication=CommunicationPreferences(**self.communication.model_dump()),
            frequency=FrequencyPreferences(**self.frequency.model_dump()),
        )


class PreferenceValueUpdate(BaseModel):
    """Payload used to change a single preference field."""

    value: Union[bool, TimeOfDay]


__all__ = ["NotificationPreferencesSchema", "PreferenceValueUpdate"]
