"""Bearer-token authentication.

Tokens are issued by the identity service and share its HMAC secret. The
subject claim carries the user id; ``role`` is "admin" for operators.
"""
import uuid
from dataclasses import dataclass
from datetime import timedelta

from jose import JWTError, jwt

from price_alerts.core.utils import utcnow


class InvalidCredentials(Exception):
    """The token is missing, malformed, expired or names no user."""


@dataclass(frozen=True)
class CurrentUser:
    user_id: uuid.UUID
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def create_access_token(
    user_id: uuid.UUID,
    secret: str,
    algorithm: str = "HS256",
    role: str = "user",
    minutes: int = 60,
) -> str:
    """Issue a token (tests and the CLI; production tokens come from the identity service)."""
    expire = utcnow() + timedelta(minutes=minutes)
    payload = {"sub": str(user_id), "role": role, "exp": expire}
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_access_token(token: str, secret: str, algorithm: str = "HS256") -> CurrentUser:
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except JWTError as exc:
        raise InvalidCredentials("Invalid token") from exc

    subject = payload.get("sub") or payload.get("userId")
    if not subject:
        raise InvalidCredentials("Invalid token")
    try:
        user_id = uuid.UUID(str(subject))
    except ValueError as exc:
        raise InvalidCredentials("Invalid token subject") from exc
    return CurrentUser(user_id=user_id, role=str(payload.get("role") or "user"))
