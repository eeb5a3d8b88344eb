"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from alerts_engine.application.use_cases.notifications import (
    EngineState,
    NotificationEngine,
    build_notification_engine,
    create_engine_state,
)
from alerts_engine.domain.entities import AuthSession
from alerts_engine.infrastructure.database import get_db
from alerts_engine.infrastructure.notifications import toast_publisher
from alerts_engine.infrastructure.security import TokenSessionProvider

# Tokens are issued by the identity service; this API only verifies them.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token", auto_error=False)


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_session_provider(token: str | None = Depends(oauth2_scheme)) -> TokenSessionProvider:
    """Return the session provider bound to the request's bearer token."""

    if not token:
        raise _unauthorized()
    return TokenSessionProvider(token)


def get_current_session(
    response: Response,
    sessions: TokenSessionProvider = Depends(get_session_provider),
) -> AuthSession:
    """Return the authenticated session and expose a refreshed token."""

    session = sessions.get_session()
    if session is None:
        raise _unauthorized()
    if sessions.refresh_session() and sessions.token:
        response.headers["X-Refreshed-Token"] = sessions.token
    return session


def get_engine_state(request: Request) -> EngineState:
    """Return the queue and throttle stored on the application."""

    state = getattr(request.app.state, "notification_engine", None)
    if state is None:
        state = create_engine_state()
        request.app.state.notification_engine = state
    return state


def get_notification_engine(
    db: Session = Depends(get_db),
    sessions: TokenSessionProvider = Depends(get_session_provider),
    state: EngineState = Depends(get_engine_state),
    _: AuthSession = Depends(get_current_session),
) -> NotificationEngine:
    """Assemble the notification components for the current request."""

    return build_notification_engine(
        db,
        sessions=sessions,
        state=state,
        publisher=toast_publisher,
    )
