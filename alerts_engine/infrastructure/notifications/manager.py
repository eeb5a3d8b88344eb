"""Registry of open notification websockets."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import WebSocket
from starlette.websockets import WebSocketState

logger = logging.getLogger(__name__)


class NotificationConnectionManager:
    """Track the websockets opened by each user and fan messages out to them."""

    def __init__(self) -> None:
        self._connections: dict[str, list[WebSocket]] = {}

    async def connect(self, user_id: str, websocket: WebSocket) -> None:
        await websocket.accept()
        self._connections.setdefault(user_id, []).append(websocket)
        logger.debug("User %s opened a notification socket (%s open)", user_id, self.connection_count(user_id))

    def disconnect(self, user_id: str, websocket: WebSocket) -> None:
        sockets = [ws for ws in self._connections.get(user_id, []) if ws is not websocket]
        if sockets:
            self._connections[user_id] = sockets
        else:
            self._connections.pop(user_id, None)

    def connection_count(self, user_id: str) -> int:
        return len(self._connections.get(user_id, []))

    async def send_to_user(self, user_id: str, message: dict[str, Any]) -> int:
        """Send ``message`` to every open socket of ``user_id``; return deliveries."""

        delivered = 0
        for websocket in list(self._connections.get(user_id, [])):
            if websocket.client_state is not WebSocketState.CONNECTED:
                self.disconnect(user_id, websocket)
                continue
            try:
                await websocket.send_json(message)
            except (RuntimeError, OSError) as exc:
                logger.debug("Dropping websocket for user %s: %s", user_id, exc)
                self.disconnect(user_id, websocket)
                continue
            delivered += 1
        return delivered


notification_manager = NotificationConnectionManager()


__all__ = ["NotificationConnectionManager", "notification_manager"]
