"""Domain records handed between the stores, services and routers.

Field names are snake_case in Python and camelCase on the wire.
"""
import uuid
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases; accepts either spelling."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class AlertType(str, Enum):
    """Rules an alert may apply to a price sample."""

    BELOW = "below"
    ABOVE = "above"
    PERCENTAGE = "percentage"


class Product(CamelModel):
    """Read-only view of a catalog product."""

    id: uuid.UUID
    name: str
    current_price: int
    currency: str = "USD"


class PriceAlert(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    product_id: uuid.UUID
    target_price: int
    currency: str
    # Kept as free text: unknown values are stored and evaluated as inert.
    alert_type: str
    threshold: float | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class NotificationPreferences(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    notification_email: bool
    notification_push: bool
    quiet_hours_start: str | None = None
    quiet_hours_end: str | None = None
    timezone: str
    language: str
    currency: str


class AnonymousPriceAlert(CamelModel):
    id: uuid.UUID
    email: str
    product_id: uuid.UUID
    target_price: int
    currency: str
    alert_type: str
    threshold: float | None = None
    verification_token: str
    management_token: str
    is_verified: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime


class AnonymousAlertPublic(CamelModel):
    """Anonymous alert without its tokens, safe to list by e-mail address."""

    id: uuid.UUID
    email: str
    product_id: uuid.UUID
    target_price: int
    currency: str
    alert_type: str
    threshold: float | None = None
    is_verified: bool
    is_active: bool
    created_at: datetime


class AlertStats(CamelModel):
    total_alerts: int
    active_alerts: int
    total_users: int


class AnonymousAlertStats(CamelModel):
    total_alerts: int
    active_alerts: int
    verified_alerts: int
    total_emails: int
