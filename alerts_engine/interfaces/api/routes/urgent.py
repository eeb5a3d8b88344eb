"""Endpoints exposing urgent items and the reminder scan."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from alerts_engine.application.use_cases.notifications import NotificationEngine
from alerts_engine.domain.entities import AuthSession
from alerts_engine.interfaces.api.dependencies import get_current_session, get_notification_engine
from alerts_engine.interfaces.api.schemas import NotificationBatchResult, ScanResult, UrgentItemRead

router = APIRouter(prefix="/urgent", tags=["urgent"])


@router.get("/items", response_model=list[UrgentItemRead])
def list_urgent_items(
    engine: NotificationEngine = Depends(get_notification_engine),
    session: AuthSession = Depends(get_current_session),
) -> list[UrgentItemRead]:
    """Return loans and planned purchases due within the reminder window."""

    items = engine.scanner.list_urgent_items(session.user_id)
    return [UrgentItemRead.from_entity(item) for item in items]


@router.post("/scan", response_model=ScanResult)
def scan_urgent_items(
    engine: NotificationEngine = Depends(get_notification_engine),
    session: AuthSession = Depends(get_current_session),
) -> ScanResult:
    return ScanResult(scanned=engine.scanner.scan(session.user_id))


@router.post("/scan/force", response_model=ScanResult)
def force_scan_urgent_items(
    engine: NotificationEngine = Depends(get_notification_engine),
    session: AuthSession = Depends(get_current_session),
) -> ScanResult:
    return ScanResult(scanned=engine.scanner.force_scan(session.user_id))


@router.delete("/notifications", response_model=NotificationBatchResult)
def clear_urgent_notifications(
    engine: NotificationEngine = Depends(get_notification_engine),
    session: AuthSession = Depends(get_current_session),
) -> NotificationBatchResult:
    return NotificationBatchResult(updated=engine.scanner.clear_all(session.user_id))
