"""FastAPI dependencies: the lifespan puts the DI container on app.state; these
getters resolve services from it and authenticate the caller.
"""
import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request, WebSocket
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from price_alerts.config import Settings
from price_alerts.container import Container
from price_alerts.security import (CurrentUser, InvalidCredentials,
                                   decode_access_token)
from price_alerts.services import AnonymousAlertService, NotificationService
from price_alerts.store import AlertStore
from price_alerts.transport import ConnectionRegistry

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_container_ws(websocket: WebSocket) -> Container:
    return websocket.scope["app"].state.container


def get_settings_dep(request: Request) -> Settings:
    return get_container(request).settings()


def get_alert_store(request: Request) -> AlertStore:
    return get_container(request).alert_store()


def get_notification_service(request: Request) -> NotificationService:
    return get_container(request).notification_service()


def get_anonymous_service(request: Request) -> AnonymousAlertService:
    return get_container(request).anonymous_service()


def get_registry(request: Request) -> ConnectionRegistry:
    return get_container(request).registry()


def get_current_user(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> CurrentUser:
    """Authenticate the bearer token (401 when missing or invalid)."""
    if creds is None:
        raise HTTPException(status_code=401, detail="Access token required")
    settings = get_settings_dep(request)
    try:
        return decode_access_token(creds.credentials, settings.jwt_secret, settings.jwt_algorithm)
    except InvalidCredentials as exc:
        logger.info("Rejected token: %s", exc)
        raise HTTPException(status_code=401, detail="Invalid or expired token") from exc


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user


def get_registry_ws(websocket: WebSocket) -> ConnectionRegistry:
    return get_container_ws(websocket).registry()


def get_settings_ws(websocket: WebSocket) -> Settings:
    return get_container_ws(websocket).settings()


# Type aliases for route injection
AlertStoreDep = Annotated[AlertStore, Depends(get_alert_store)]
NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]
AnonymousServiceDep = Annotated[AnonymousAlertService, Depends(get_anonymous_service)]
RegistryDep = Annotated[ConnectionRegistry, Depends(get_registry)]
CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]
AdminUserDep = Annotated[CurrentUser, Depends(require_admin)]
RegistryWs = Annotated[ConnectionRegistry, Depends(get_registry_ws)]
SettingsWs = Annotated[Settings, Depends(get_settings_ws)]
