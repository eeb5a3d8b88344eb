"""Endpoints and websocket handler for in-app notifications."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status

from alerts_engine.application.use_cases.notifications import NotificationEngine
from alerts_engine.domain.entities import AuthSession, Notification
from alerts_engine.infrastructure.database import SessionLocal
from alerts_engine.infrastructure.notifications import notification_manager, serialize_notification
from alerts_engine.infrastructure.repositories import NotificationRepository
from alerts_engine.infrastructure.security import TokenSessionProvider
from alerts_engine.interfaces.api.dependencies import get_current_session, get_notification_engine
from alerts_engine.interfaces.api.schemas import (
    NotificationBatchResult,
    NotificationMarkReadRequest,
    NotificationRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id or 0,
        user_id=notification.user_id,
        title=notification.title,
        body=notification.body,
        severity=notification.severity,
        category=notification.category,
        is_read=notification.is_read,
        created_at=notification.created_at,
        read_at=notification.read_at,
    )


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    engine: NotificationEngine = Depends(get_notification_engine),
    session: AuthSession = Depends(get_current_session),
) -> list[NotificationRead]:
    """Return the most recent notifications for the authenticated user."""

    notifications = engine.notifications.list_for_user(session.user_id)
    return [_notification_to_schema(notification) for notification in notifications]


@router.post("/read", response_model=NotificationBatchResult)
def mark_notifications_as_read(
    payload: NotificationMarkReadRequest,
    engine: NotificationEngine = Depends(get_notification_engine),
    session: AuthSession = Depends(get_current_session),
) -> NotificationBatchResult:
    updated = engine.notifications.mark_as_read(payload.unique_ids(), user_id=session.user_id)
    return NotificationBatchResult(updated=updated)


@router.post("/read-all", response_model=NotificationBatchResult)
def mark_all_notifications_as_read(
    engine: NotificationEngine = Depends(get_notification_engine),
    session: AuthSession = Depends(get_current_session),
) -> NotificationBatchResult:
    return NotificationBatchResult(updated=engine.notifications.mark_all_as_read(session.user_id))


@router.post("/digest", response_model=NotificationRead | None)
def flush_digest(
    engine: NotificationEngine = Depends(get_notification_engine),
    session: AuthSession = Depends(get_current_session),
) -> NotificationRead | None:
    """Collapse the user's batched notifications into a single summary."""

    notification = engine.dispatcher.flush_digest(session.user_id)
    if notification is None:
        return None
    return _notification_to_schema(notification)


@router.delete("/", response_model=NotificationBatchResult)
def delete_all_notifications(
    engine: NotificationEngine = Depends(get_notification_engine),
    session: AuthSession = Depends(get_current_session),
) -> NotificationBatchResult:
    return NotificationBatchResult(updated=engine.notifications.soft_delete_all(session.user_id))


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: int,
    engine: NotificationEngine = Depends(get_notification_engine),
    session: AuthSession = Depends(get_current_session),
) -> None:
    deleted = engine.notifications.soft_delete([notification_id], user_id=session.user_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found"
        )


def _notification_to_payload(notification: Notification) -> dict[str, Any]:
    return serialize_notification(notification)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams toasts and notifications to the user."""

    token = websocket.query_params.get("token")
    auth_session = TokenSessionProvider(token).get_session() if token else None
    if auth_session is None:
        await websocket.close(code=1008)
        return

    user_id = auth_session.user_id
    session = SessionLocal()
    try:
        pending_notifications = NotificationRepository(session).list_unread_for_user(user_id)
    finally:
        session.close()

    await notification_manager.connect(user_id, websocket)
    try:
        if pending_notifications:
            await websocket.send_json(
                {"type": "init", "data": [_notification_to_payload(n) for n in pending_notifications]}
            )
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list) and ids:
                    ack_session = SessionLocal()
                    try:
                        NotificationRepository(ack_session).mark_as_read(ids, user_id=user_id)
                    finally:
                        ack_session.close()
                continue
    except WebSocketDisconnect:
        notification_manager.disconnect(user_id, websocket)
    except Exception:
        notification_manager.disconnect(user_id, websocket)
        raise
