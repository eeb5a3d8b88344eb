"""Persistence layer for lend/borrow records."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from typing import Iterable

from sqlalchemy.orm import Session

from alerts_engine.domain.entities import LendBorrow
from alerts_engine.infrastructure.models import LendBorrowModel
from alerts_engine.utils import ensure_app_timezone


class LendBorrowRepository:
    """Provide read and status update operations for :class:`LendBorrow` records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list(
        self,
        *,
        user_id: str,
        statuses: Iterable[str] | None = None,
        exclude_statuses: Iterable[str] | None = None,
    ) -> Sequence[LendBorrow]:
        query = self.session.query(LendBorrowModel).filter(
            LendBorrowModel.user_id == user_id
        )
        if statuses is not None:
            query = query.filter(LendBorrowModel.status.in_(list(statuses)))
        if exclude_statuses is not None:
            query = query.filter(LendBorrowModel.status.not_in(list(exclude_statuses)))
        query = query.order_by(LendBorrowModel.due_date.asc(), LendBorrowModel.id.asc())
        return [self._to_entity(model) for model in query.all()]

    def list_ids_due_before(
        self, *, user_id: str, status: str, before: date
    ) -> list[str]:
        rows = (
            self.session.query(LendBorrowModel.id)
            .filter(LendBorrowModel.user_id == user_id)
            .filter(LendBorrowModel.status == status)
            .filter(LendBorrowModel.due_date.is_not(None))
            .filter(LendBorrowModel.due_date < before)
            .all()
        )
        return [row.id for row in rows]

    def get(self, record_id: str) -> LendBorrow | None:
        model = self.session.get(LendBorrowModel, record_id)
        return self._to_entity(model) if model else None

    def create(self, record: LendBorrow) -> LendBorrow:
        model = LendBorrowModel(
            id=record.id,
            user_id=record.user_id,
            type=record.type,
            person_name=record.person_name,
            amount=record.amount,
            currency=record.currency,
            due_date=record.due_date,
            status=record.status,
            notes=record.notes,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update_status(self, record_ids: Iterable[str], status: str) -> int:
        """Set ``status`` on every record in ``record_ids`` in one statement."""

        ids = list(record_ids)
        if not ids:
            return 0
        updated = (
            self.session.query(LendBorrowModel)
            .filter(LendBorrowModel.id.in_(ids))
            .update({LendBorrowModel.status: status}, synchronize_session=False)
        )
        self.session.commit()
        return updated

    @staticmethod
    def _to_entity(model: LendBorrowModel) -> LendBorrow:
        return LendBorrow(
            id=model.id,
            user_id=model.user_id,
            type=model.type,
            person_name=model.person_name,
            amount=Decimal(model.amount),
            currency=model.currency,
            due_date=model.due_date,
            status=model.status,
            notes=model.notes,
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["LendBorrowRepository"]
