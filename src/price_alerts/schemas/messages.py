"""Real-time (WebSocket) payloads."""
import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from price_alerts.core.utils import utcnow
from price_alerts.schemas.records import CamelModel


class PriceAlertPayload(CamelModel):
    """Body of a ``price_alert`` push message."""

    alert_id: uuid.UUID
    product_id: uuid.UUID
    product_name: str
    target_price: int
    current_price: int
    currency: str
    alert_type: str
    threshold: float | None = None


class RealtimeMessage(BaseModel):
    """Envelope for everything sent over a real-time session."""

    type: str  # price_alert | connected | pong | error | auth_ok
    data: dict[str, Any] | None = None
    timestamp: datetime = Field(default_factory=utcnow)

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
