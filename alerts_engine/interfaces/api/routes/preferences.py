"""Endpoints for reading and editing notification preferences."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from alerts_engine.application.use_cases.notifications import NotificationEngine
from alerts_engine.domain.entities import AuthSession
from alerts_engine.interfaces.api.dependencies import get_current_session, get_notification_engine
from alerts_engine.interfaces.api.schemas import (
    NotificationPreferencesSchema,
    PreferenceValueUpdate,
)

router = APIRouter(prefix="/notifications/preferences", tags=["preferences"])


def _save_conflict() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="Notification preferences could not be saved",
    )


@router.get("", response_model=NotificationPreferencesSchema)
def read_preferences(
    engine: NotificationEngine = Depends(get_notification_engine),
    session: AuthSession = Depends(get_current_session),
) -> NotificationPreferencesSchema:
    """Return the user's preferences merged over the defaults."""

    return NotificationPreferencesSchema.from_entity(engine.preferences.get(session.user_id))


@router.put("", response_model=NotificationPreferencesSchema)
def replace_preferences(
    payload: NotificationPreferencesSchema,
    engine: NotificationEngine = Depends(get_notification_engine),
    session: AuthSession = Depends(get_current_session),
) -> NotificationPreferencesSchema:
    preferences = payload.to_entity()
    if not engine.preferences.save(session.user_id, preferences):
        raise _save_conflict()
    return NotificationPreferencesSchema.from_entity(preferences)


@router.patch("/{category}/{key}", response_model=NotificationPreferencesSchema)
def update_preference(
    category: str,
    key: str,
    payload: PreferenceValueUpdate,
    engine: NotificationEngine = Depends(get_notification_engine),
    session: AuthSession = Depends(get_current_session),
) -> NotificationPreferencesSchema:
    """Change a single preference field and return the resulting document."""

    current = engine.preferences.get(session.user_id)
    try:
        current.with_value(category, key, payload.value)
    except (KeyError, TypeError) as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid preference {category}.{key}",
        ) from exc

    if not engine.preferences.update(session.user_id, category, key, payload.value):
        raise _save_conflict()
    return NotificationPreferencesSchema.from_entity(engine.preferences.get(session.user_id))
