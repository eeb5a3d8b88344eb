"""Persistence layer for purchases."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Iterable

from sqlalchemy.orm import Session

from alerts_engine.domain.entities import Purchase
from alerts_engine.infrastructure.models import PurchaseModel
from alerts_engine.utils import ensure_app_timezone


class PurchaseRepository:
    """Provide read operations for :class:`Purchase` records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list(
        self,
        *,
        user_id: str,
        statuses: Iterable[str] | None = None,
        exclude_statuses: Iterable[str] | None = None,
        with_planned_date: bool = False,
    ) -> Sequence[Purchase]:
        query = self.session.query(PurchaseModel).filter(PurchaseModel.user_id == user_id)
        if statuses is not None:
            query = query.filter(PurchaseModel.status.in_(list(statuses)))
        if exclude_statuses is not None:
            query = query.filter(PurchaseModel.status.not_in(list(exclude_statuses)))
        if with_planned_date:
            query = query.filter(PurchaseModel.planned_date.is_not(None))
        query = query.order_by(PurchaseModel.planned_date.asc(), PurchaseModel.id.asc())
        return [self._to_entity(model) for model in query.all()]

    def create(self, purchase: Purchase) -> Purchase:
        model = PurchaseModel(
            id=purchase.id,
            user_id=purchase.user_id,
            title=purchase.title,
            price=purchase.price,
            currency=purchase.currency,
            planned_date=purchase.planned_date,
            status=purchase.status,
            priority=purchase.priority,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: PurchaseModel) -> Purchase:
        return Purchase(
            id=model.id,
            user_id=model.user_id,
            title=model.title,
            price=Decimal(model.price),
            currency=model.currency,
            planned_date=model.planned_date,
            status=model.status,
            priority=model.priority,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["PurchaseRepository"]
