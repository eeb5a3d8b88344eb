"""Persistence helpers for notification preference documents."""

from __future__ import annotations

from collections.abc import Mapping
from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy.exc import NoResultFound, SQLAlchemyError
from sqlalchemy.orm import Session

from alerts_engine.domain.entities import PREFERENCE_KEY
from alerts_engine.infrastructure.models import NotificationPreferenceModel
from alerts_engine.utils import now_in_app_naive_datetime

from .errors import PreferenceStoreError, StoreErrorReason, classify_error


class PreferenceDocumentStore:
    """Store JSON preference documents keyed by ``(user_id, preference_key)``.

    Every failure is raised as :class:`PreferenceStoreError` carrying the reason
    so callers can pick a fallback strategy without knowing the database driver.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str, key: str = PREFERENCE_KEY) -> dict[str, Any]:
        with self._translate_errors():
            model = (
                self.session.query(NotificationPreferenceModel)
                .filter(NotificationPreferenceModel.user_id == user_id)
                .filter(NotificationPreferenceModel.preference_key == key)
                .one()
            )
            value = model.preference_value
            return dict(value) if isinstance(value, Mapping) else {}

    def upsert(self, user_id: str, document: dict[str, Any], key: str = PREFERENCE_KEY) -> None:
        with self._translate_errors():
            model = self._find(user_id, key)
            if model is None:
                model = NotificationPreferenceModel(
                    user_id=user_id,
                    preference_key=key,
                    created_at=now_in_app_naive_datetime(),
                )
            model.preference_value = document
            model.updated_at = now_in_app_naive_datetime()
            self.session.add(model)
            self.session.commit()

    def update(self, user_id: str, document: dict[str, Any], key: str = PREFERENCE_KEY) -> None:
        """Replace an existing document; raises ``NOT_FOUND`` when no row matches."""

        with self._translate_errors():
            updated = (
                self.session.query(NotificationPreferenceModel)
                .filter(NotificationPreferenceModel.user_id == user_id)
                .filter(NotificationPreferenceModel.preference_key == key)
                .update(
                    {
                        NotificationPreferenceModel.preference_value: document,
                        NotificationPreferenceModel.updated_at: now_in_app_naive_datetime(),
                    },
                    synchronize_session=False,
                )
            )
            if not updated:
                self.session.rollback()
                raise PreferenceStoreError(
                    StoreErrorReason.NOT_FOUND,
                    f"No preference document for user {user_id}",
                )
            self.session.commit()

    def insert(self, user_id: str, document: dict[str, Any], key: str = PREFERENCE_KEY) -> None:
        with self._translate_errors():
            now = now_in_app_naive_datetime()
            self.session.add(
                NotificationPreferenceModel(
                    user_id=user_id,
                    preference_key=key,
                    preference_value=document,
                    created_at=now,
                    updated_at=now,
                )
            )
            self.session.commit()

    def _find(self, user_id: str, key: str) -> NotificationPreferenceModel | None:
        return (
            self.session.query(NotificationPreferenceModel)
            .filter(NotificationPreferenceModel.user_id == user_id)
            .filter(NotificationPreferenceModel.preference_key == key)
            .one_or_none()
        )

    @contextmanager
    def _translate_errors(self) -> Iterator[None]:
        try:
            yield
        except NoResultFound as exc:
            raise PreferenceStoreError(StoreErrorReason.NOT_FOUND, str(exc)) from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PreferenceStoreError(classify_error(exc), str(exc)) from exc


__all__ = ["PreferenceDocumentStore"]
