"""In-process registry of real-time (WebSocket) sessions.

Delivery is best-effort and at-most-once: a session that is no longer
connected, or whose send fails, is dropped and the message is not retried.
"""
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from price_alerts.core.utils import utcnow

logger = logging.getLogger(__name__)


@dataclass
class RealtimeSession:
    websocket: WebSocket
    user_id: uuid.UUID | None = None
    connected_at: datetime = field(default_factory=utcnow)


class ConnectionRegistry:
    """Connected sessions keyed by an opaque session id."""

    def __init__(self) -> None:
        self._sessions: dict[str, RealtimeSession] = {}

    def register(self, websocket: WebSocket) -> str:
        session_id = uuid.uuid4().hex
        self._sessions[session_id] = RealtimeSession(websocket=websocket)
        logger.info("RealtimeSession %s connected (%d open)", session_id, len(self._sessions))
        return session_id

    def unregister(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is not None:
            logger.info("RealtimeSession %s disconnected (%d open)", session_id, len(self._sessions))

    def bind_user(self, session_id: str, user_id: uuid.UUID) -> None:
        """Attach an authenticated user to a session (no-op for unknown ids)."""
        session = self._sessions.get(session_id)
        if session is not None:
            session.user_id = user_id

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    def stats(self) -> dict[str, int]:
        authenticated = sum(1 for s in self._sessions.values() if s.user_id is not None)
        return {
            "totalConnections": len(self._sessions),
            "authenticatedConnections": authenticated,
        }

    async def send_to(self, session_id: str, message: dict[str, Any]) -> bool:
        """Send one message to one session; returns False if it was dropped."""
        session = self._sessions.get(session_id)
        if session is None:
            return False
        if session.websocket.client_state != WebSocketState.CONNECTED:
            logger.info("RealtimeSession %s is no longer connected; dropping", session_id)
            self.unregister(session_id)
            return False
        try:
            await session.websocket.send_json(message)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.warning("Send to session %s failed, dropping: %s", session_id, exc)
            self.unregister(session_id)
            return False
        return True

    async def broadcast(self, message: dict[str, Any]) -> int:
        """Send a message to every session; returns how many received it."""
        delivered = 0
        # Snapshot: failed sessions are removed while iterating.
        for session_id in list(self._sessions):
            if await self.send_to(session_id, message):
                delivered += 1
        return delivered
