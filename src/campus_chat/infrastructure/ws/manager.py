"""In-process registry of WebSocket connections and their chat sessions."""
from __future__ import annotations

import logging
from typing import Any

from fastapi import WebSocket

from campus_chat.infrastructure.ws.protocol import WsOutbound
from campus_chat.sync.session import ChatSession

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks one ChatSession per connection; closing a connection closes its session."""

    def __init__(self) -> None:
        self._connections: dict[str, dict[WebSocket, ChatSession]] = {}

    async def connect(self, ws: WebSocket, principal_key: str, session: ChatSession) -> None:
        await ws.accept()
        self._connections.setdefault(principal_key, {})[ws] = session
        logger.debug("WS connected: %s (total=%d)", principal_key, self.connection_count)

    def disconnect(self, ws: WebSocket, principal_key: str) -> None:
        conns = self._connections.get(principal_key)
        if not conns:
            return
        session = conns.pop(ws, None)
        if session is not None:
            session.close()
        if not conns:
            del self._connections[principal_key]
        logger.debug("WS disconnected: %s", principal_key)

    def close_all(self) -> None:
        for conns in self._connections.values():
            for session in conns.values():
                session.close()
        self._connections.clear()

    @property
    def connection_count(self) -> int:
        return sum(len(conns) for conns in self._connections.values())

    async def send(self, ws: WebSocket, event_type: str, data: dict[str, Any]) -> None:
        await ws.send_text(WsOutbound(type=event_type, data=data).model_dump_json())

    async def send_error(self, ws: WebSocket, code: str, **detail: Any) -> None:
        await ws.send_text(WsOutbound.error(code, **detail).model_dump_json())
