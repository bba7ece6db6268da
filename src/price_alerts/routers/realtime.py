"""Real-time notification channel over WebSocket.

Client messages are JSON objects with a ``type``:
- ``ping``: answered with ``pong``;
- ``auth``: ``{"type": "auth", "token": "<jwt>"}`` binds the user to the session;
- anything else: answered with ``error``.
"""
import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from price_alerts.deps import RegistryWs, SettingsWs
from price_alerts.schemas import RealtimeMessage
from price_alerts.security import InvalidCredentials, decode_access_token

logger = logging.getLogger(__name__)
router = APIRouter(tags=["realtime"])


def _message(kind: str, **data) -> dict:
    return RealtimeMessage(type=kind, data=data or None).to_json()


@router.websocket("/ws")
async def realtime_socket(websocket: WebSocket, registry: RegistryWs, settings: SettingsWs):
    await websocket.accept()
    session_id = registry.register(websocket)
    try:
        await websocket.send_json(
            _message("connected", sessionId=session_id, message="Connected to price alerts")
        )
        while True:
            raw = await websocket.receive_text()
            try:
                incoming = json.loads(raw)
            except json.JSONDecodeError:
                await websocket.send_json(_message("error", message="Invalid JSON"))
                continue
            kind = incoming.get("type") if isinstance(incoming, dict) else None

            if kind == "ping":
                await websocket.send_json(_message("pong"))
            elif kind == "auth":
                try:
                    user = decode_access_token(
                        str(incoming.get("token") or ""),
                        settings.jwt_secret,
                        settings.jwt_algorithm,
                    )
                except InvalidCredentials:
                    await websocket.send_json(_message("error", message="Authentication failed"))
                    continue
                registry.bind_user(session_id, user.user_id)
                await websocket.send_json(_message("auth_ok", userId=str(user.user_id)))
            else:
                await websocket.send_json(
                    _message("error", message=f"Unknown message type: {kind}")
                )
    except WebSocketDisconnect:
        logger.debug("Realtime client %s disconnected", session_id)
    finally:
        registry.unregister(session_id)
