"""Read, reconcile and persist notification preferences."""

from __future__ import annotations

import logging
from typing import Any, Final, Protocol

from alerts_engine.domain.entities import (
    AuthSession,
    NotificationPreferences,
    default_preferences,
    section_of,
)
from alerts_engine.infrastructure.repositories import (
    PreferenceDocumentStore,
    PreferenceStoreError,
    StoreErrorReason,
)

logger = logging.getLogger(__name__)

# Notification category label -> (preference section, flag).
CATEGORY_PREFERENCE_MAP: Final[dict[str, tuple[str, str]]] = {
    "overdue": ("financial", "overdue_payments"),
    "due_soon": ("financial", "due_soon_reminders"),
    "upcoming": ("financial", "upcoming_deadlines"),
    "low_balance": ("financial", "low_balance_alerts"),
    "budget_exceeded": ("financial", "budget_exceeded"),
    "large_transaction": ("financial", "large_transactions"),
    "new_feature": ("system", "new_features"),
    "system_update": ("system", "system_updates"),
    "tip": ("system", "tips_guidance"),
    "security_alert": ("system", "security_alerts"),
    "transaction_confirmation": ("activity", "transaction_confirmations"),
    "account_change": ("activity", "account_changes"),
    "category_update": ("activity", "category_updates"),
    "backup_reminder": ("activity", "backup_reminders"),
}


class SessionProvider(Protocol):
    """Identity collaborator consulted before writing preferences."""

    def get_session(self) -> AuthSession | None: ...

    def refresh_session(self) -> bool: ...


class PreferenceRepository:
    """Reconcile stored preference documents with the built-in defaults.

    Reads fail open to the defaults and writes report success as a boolean; no
    method lets a storage error escape to the caller.
    """

    def __init__(self, store: PreferenceDocumentStore, sessions: SessionProvider) -> None:
        self._store = store
        self._sessions = sessions

    def get(self, user_id: str) -> NotificationPreferences:
        try:
            document = self._store.get(user_id)
        except PreferenceStoreError as exc:
            if exc.reason is StoreErrorReason.NOT_FOUND:
                defaults = default_preferences()
                if not self.save(user_id, defaults):
                    logger.info("Default preferences for user %s were not persisted", user_id)
                return defaults
            if exc.reason is StoreErrorReason.MISSING_TABLE:
                logger.warning("Preference table is missing; using defaults for user %s", user_id)
            else:
                logger.warning(
                    "Could not read preferences for user %s (%s): %s",
                    user_id,
                    exc.reason.value,
                    exc,
                )
            return default_preferences()
        return NotificationPreferences.from_document(document)

    def save(self, user_id: str, preferences: NotificationPreferences) -> bool:
        session = self._current_session()
        if session is None:
            logger.warning("Refusing to save preferences for user %s without a session", user_id)
            return False
        if session.user_id != str(user_id):
            logger.warning(
                "Refusing to save preferences for user %s from session of user %s",
                user_id,
                session.user_id,
            )
            return False

        document = preferences.to_document()
        try:
            self._store.upsert(user_id, document)
        except PreferenceStoreError as exc:
            if exc.reason is StoreErrorReason.PERMISSION_DENIED:
                return self._retry_after_refresh(user_id, document)
            if exc.reason is StoreErrorReason.UNIQUE_CONFLICT:
                return self._update_or_insert(user_id, document)
            logger.error(
                "Could not save preferences for user %s (%s): %s",
                user_id,
                exc.reason.value,
                exc,
            )
            return False
        return True

    def update(self, user_id: str, category: str, key: str, value: Any) -> bool:
        """Change a single preference field and save the whole document."""

        current = self.get(user_id)
        try:
            updated = current.with_value(category, key, value)
        except (KeyError, TypeError) as exc:
            logger.warning("Rejected preference update for user %s: %s", user_id, exc)
            return False
        return self.save(user_id, updated)

    @staticmethod
    def should_send(preferences: NotificationPreferences, category: str, key: str) -> bool:
        section = section_of(preferences, category)
        if section is None:
            return False
        return getattr(section, key, None) is True

    @classmethod
    def should_send_category(cls, preferences: NotificationPreferences, label: str) -> bool:
        """Apply :meth:`should_send` to the flag mapped from a category label."""

        mapping = CATEGORY_PREFERENCE_MAP.get(label)
        if mapping is None:
            logger.info("Unknown notification category %r; not sending", label)
            return False
        category, key = mapping
        return cls.should_send(preferences, category, key)

    def _current_session(self) -> AuthSession | None:
        try:
            return self._sessions.get_session()
        except Exception as exc:  # pragma: no cover - provider specific failures
            logger.warning("Session lookup failed: %s", exc)
            return None

    def _retry_after_refresh(self, user_id: str, document: dict[str, Any]) -> bool:
        logger.info("Permission denied saving preferences for user %s; refreshing session", user_id)
        if not self._sessions.refresh_session():
            logger.error("Session refresh failed; preferences for user %s not saved", user_id)
            return False
        try:
            self._store.upsert(user_id, document)
        except PreferenceStoreError as exc:
            logger.error(
                "Retry after session refresh failed for user %s (%s): %s",
                user_id,
                exc.reason.value,
                exc,
            )
            return False
        return True

    def _update_or_insert(self, user_id: str, document: dict[str, Any]) -> bool:
        logger.info("Preference upsert conflicted for user %s; updating by key", user_id)
        try:
            self._store.update(user_id, document)
        except PreferenceStoreError as update_error:
            logger.info(
                "Update by key failed for user %s (%s); inserting",
                user_id,
                update_error.reason.value,
            )
        else:
            return True

        try:
            self._store.insert(user_id, document)
        except PreferenceStoreError as exc:
            logger.error(
                "Every save path failed for user %s (%s): %s",
                user_id,
                exc.reason.value,
                exc,
            )
            return False
        return True


__all__ = ["CATEGORY_PREFERENCE_MAP", "PreferenceRepository", "SessionProvider"]
