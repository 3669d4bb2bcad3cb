from __future__ import annotations

import logging
from typing import Any, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)

NEW_DATA_EVENT = "newData"


class ConnectionManager:
    """Registry of connected browser channels with fan-out."""

    def __init__(self):
        self.active_connections: Set[WebSocket] = set()

    def __len__(self) -> int:
        return len(self.active_connections)

    def count(self) -> int:
        return len(self.active_connections)

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.active_connections.add(websocket)
        logger.info("WS connected connections=%s", len(self.active_connections))

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket in self.active_connections:
            self.active_connections.discard(websocket)
            logger.info("WS disconnected connections=%s", len(self.active_connections))

    async def broadcast(self, event: str, data: Any) -> int:
        """Send ``{"type": event, "data": data}`` to every channel.

        Channels whose send fails are dropped. Returns the number of channels
        the message was handed to.
        """
        message = {"type": event, "data": data}
        delivered = 0
        disconnected = set()
        for websocket in list(self.active_connections):
            try:
                await websocket.send_json(message)
                delivered += 1
            except Exception as exc:
                logger.debug("WS push failed, dropping channel: %s", exc)
                disconnected.add(websocket)

        for ws in disconnected:
            self.disconnect(ws)
        return delivered
