"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Iterable

from sqlalchemy.orm import Session

from alerts_engine.domain.entities import Notification
from alerts_engine.infrastructure.models import NotificationModel
from alerts_engine.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_naive_datetime,
)


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects.

    Notifications are never removed from the table; ``deleted`` marks them as
    hidden from the user.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_user(
        self,
        user_id: str,
        *,
        limit: int | None = 100,
    ) -> Sequence[Notification]:
        query = self._active_query(user_id).order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def list_unread_for_user(
        self, user_id: str, *, limit: int | None = 50
    ) -> Sequence[Notification]:
        query = (
            self._active_query(user_id)
            .filter(NotificationModel.is_read.is_(False))
            .order_by(
                NotificationModel.created_at.desc(), NotificationModel.id.desc()
            )
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def list_by_categories(
        self, user_id: str, categories: Iterable[str]
    ) -> Sequence[Notification]:
        """Return non-deleted notifications whose category is in ``categories``."""

        query = (
            self._active_query(user_id)
            .filter(NotificationModel.category.in_(list(categories)))
            .order_by(
                NotificationModel.created_at.desc(), NotificationModel.id.desc()
            )
        )
        return [self._to_entity(model) for model in query.all()]

    def find_active_by_dedup_key(
        self, user_id: str, dedup_key: str
    ) -> Notification | None:
        model = (
            self._active_query(user_id)
            .filter(NotificationModel.dedup_key == dedup_key)
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
            .first()
        )
        return self._to_entity(model) if model else None

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification, include_creation_fields=True)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def refresh_content(
        self, notification_id: int, *, title: str, body: str | None, severity: str
    ) -> None:
        """Rewrite the text of an existing notification without touching its state."""

        self.session.query(NotificationModel).filter(
            NotificationModel.id == notification_id
        ).update(
            {
                NotificationModel.title: title,
                NotificationModel.body: body,
                NotificationModel.severity: severity,
                NotificationModel.updated_at: now_in_app_naive_datetime(),
            },
            synchronize_session=False,
        )
        self.session.commit()

    def mark_as_read(self, notification_ids: Iterable[int], *, user_id: str) -> int:
        ids = [notification_id for notification_id in notification_ids if notification_id is not None]
        if not ids:
            return 0
        updated = self._active_query(user_id).filter(
            NotificationModel.id.in_(ids),
        ).update(
            {
                NotificationModel.is_read: True,
                NotificationModel.read_at: now_in_app_naive_datetime(),
            },
            synchronize_session=False,
        )
        self.session.commit()
        return updated

    def mark_all_as_read(self, user_id: str) -> int:
        updated = (
            self._active_query(user_id)
            .filter(NotificationModel.is_read.is_(False))
            .update(
                {
                    NotificationModel.is_read: True,
                    NotificationModel.read_at: now_in_app_naive_datetime(),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated

    def soft_delete(self, notification_ids: Iterable[int], *, user_id: str) -> int:
        ids = [notification_id for notification_id in notification_ids if notification_id is not None]
        if not ids:
            return 0
        return self._soft_delete_query(
            self._active_query(user_id).filter(NotificationModel.id.in_(ids))
        )

    def soft_delete_all(self, user_id: str) -> int:
        return self._soft_delete_query(self._active_query(user_id))

    def soft_delete_by_categories(self, user_id: str, categories: Iterable[str]) -> int:
        return self._soft_delete_query(
            self._active_query(user_id).filter(
                NotificationModel.category.in_(list(categories))
            )
        )

    def soft_delete_by_sources(
        self,
        user_id: str,
        *,
        source_type: str,
        source_ids: Iterable[str],
        categories: Iterable[str],
    ) -> int:
        """Hide notifications generated for any of ``source_ids``."""

        ids = [str(source_id) for source_id in source_ids]
        if not ids:
            return 0
        return self._soft_delete_query(
            self._active_query(user_id)
            .filter(NotificationModel.source_type == source_type)
            .filter(NotificationModel.source_id.in_(ids))
            .filter(NotificationModel.category.in_(list(categories)))
        )

    def soft_delete_superseded(
        self,
        user_id: str,
        *,
        source_type: str,
        source_id: str,
        keep_dedup_key: str,
    ) -> int:
        """Hide notifications for a source whose key differs from ``keep_dedup_key``."""

        return self._soft_delete_query(
            self._active_query(user_id)
            .filter(NotificationModel.source_type == source_type)
            .filter(NotificationModel.source_id == str(source_id))
            .filter(NotificationModel.dedup_key != keep_dedup_key)
        )

    def count_for_user(self, user_id: str, *, include_deleted: bool = False) -> int:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.user_id == user_id
        )
        if not include_deleted:
            query = query.filter(NotificationModel.deleted.is_(False))
        return query.count()

    def _active_query(self, user_id: str):
        return (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.deleted.is_(False))
        )

    def _soft_delete_query(self, query) -> int:
        updated = query.update(
            {
                NotificationModel.deleted: True,
                NotificationModel.updated_at: now_in_app_naive_datetime(),
            },
            synchronize_session=False,
        )
        self.session.commit()
        return updated

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationModel,
        notification: Notification,
        *,
        include_creation_fields: bool,
    ) -> None:
        if include_creation_fields:
            model.created_at = (
                ensure_app_naive_datetime(notification.created_at)
                or now_in_app_naive_datetime()
            )
        model.user_id = notification.user_id
        model.title = notification.title
        model.body = notification.body
        model.severity = notification.severity
        model.category = notification.category
        model.source_type = notification.source_type
        model.source_id = notification.source_id
        model.dedup_key = notification.dedup_key
        model.is_read = notification.is_read
        model.deleted = notification.deleted
        model.read_at = ensure_app_naive_datetime(notification.read_at)

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            title=model.title,
            body=model.body,
            severity=model.severity,
            category=model.category,
            source_type=model.source_type,
            source_id=model.source_id,
            dedup_key=model.dedup_key,
            is_read=bool(model.is_read),
            deleted=bool(model.deleted),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
            read_at=ensure_app_timezone(model.read_at),
        )


__all__ = ["NotificationRepository"]
