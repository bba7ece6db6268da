"""Request bodies accepted by the HTTP layer, validated before any store access."""
import uuid

from pydantic import EmailStr, Field, model_validator

from price_alerts.core.utils import HHMM_PATTERN
from price_alerts.schemas.records import AlertType, CamelModel


class AlertCreate(CamelModel):
    product_id: uuid.UUID
    target_price: int = Field(ge=1, description="Target price in currency minor units")
    currency: str = Field(default="USD", min_length=3, max_length=3)
    alert_type: AlertType = AlertType.BELOW
    threshold: float | None = Field(default=None, ge=0.1, le=100)


class AlertUpdate(CamelModel):
    """Partial update; only fields present in the body are applied."""

    target_price: int | None = Field(default=None, ge=1)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    alert_type: AlertType | None = None
    threshold: float | None = Field(default=None, ge=0.1, le=100)
    is_active: bool | None = None

    def changes(self) -> dict:
        data = self.model_dump(exclude_unset=True)
        if isinstance(data.get("alert_type"), AlertType):
            data["alert_type"] = data["alert_type"].value
        return data


class PreferencesUpdate(CamelModel):
    notification_email: bool | None = None
    notification_push: bool | None = None
    quiet_hours_start: str | None = Field(default=None, pattern=HHMM_PATTERN)
    quiet_hours_end: str | None = Field(default=None, pattern=HHMM_PATTERN)
    timezone: str | None = Field(default=None, min_length=1, max_length=50)
    language: str | None = Field(default=None, min_length=2, max_length=5)
    currency: str | None = Field(default=None, min_length=3, max_length=3)

    @model_validator(mode="after")
    def _quiet_hours_pair(self) -> "PreferencesUpdate":
        fields = self.model_fields_set
        sent = {"quiet_hours_start", "quiet_hours_end"} & fields
        if len(sent) == 1:
            raise ValueError("quietHoursStart and quietHoursEnd must be sent together")
        if sent and (self.quiet_hours_start is None) != (self.quiet_hours_end is None):
            raise ValueError("quietHoursStart and quietHoursEnd must both be set or both be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class AnonymousAlertCreate(CamelModel):
    email: EmailStr
    product_id: uuid.UUID
    target_price: int = Field(ge=1, description="Target price in currency minor units")
    currency: str = Field(default="USD", min_length=3, max_length=3)
    alert_type: AlertType = AlertType.BELOW
    threshold: float | None = Field(default=None, ge=0.1, le=100)


class AnonymousAlertUpdate(AlertUpdate):
    """Same partial-update shape as an account alert."""


class PriceUpdateEvent(CamelModel):
    product_id: uuid.UUID
    current_price: int = Field(ge=0, description="Current price in minor units")
