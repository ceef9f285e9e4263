"""Registry of the notification websockets currently open."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple

from fastapi import WebSocket, WebSocketDisconnect

from jobchat.domain.entities import RecipientKind

logger = logging.getLogger(__name__)

# Applicant and employer ids come from different tables, so the kind is part of the key.
RecipientKey = Tuple[RecipientKind, int]


class NotificationConnectionManager:
    """Track the open sockets of each recipient; one recipient may hold several tabs."""

    def __init__(self) -> None:
        self._sockets: Dict[RecipientKey, List[WebSocket]] = {}

    async def connect(self, key: RecipientKey, websocket: WebSocket) -> None:
        await websocket.accept()
        self._sockets.setdefault(key, []).append(websocket)
        logger.debug("%s %s opened a notification stream", key[0].value, key[1])

    def disconnect(self, key: RecipientKey, websocket: WebSocket) -> None:
        remaining = [s for s in self._sockets.get(key, []) if s is not websocket]
        if remaining:
            self._sockets[key] = remaining
        else:
            self._sockets.pop(key, None)

    def is_connected(self, key: RecipientKey) -> bool:
        return key in self._sockets

    async def send(self, key: RecipientKey, message: dict[str, Any]) -> int:
        """Deliver ``message`` to every socket of ``key`` and return how many took it.

        Sockets that turn out to be closed are unregistered.
        """

        delivered = 0
        closed: List[WebSocket] = []
        for websocket in tuple(self._sockets.get(key, ())):
            try:
                await websocket.send_json(message)
            except (RuntimeError, WebSocketDisconnect):
                closed.append(websocket)
            else:
                delivered += 1
        for websocket in closed:
            logger.debug("Dropping closed notification socket for %s", key)
            self.disconnect(key, websocket)
        return delivered


notification_manager = NotificationConnectionManager()


__all__ = ["NotificationConnectionManager", "RecipientKey", "notification_manager"]
