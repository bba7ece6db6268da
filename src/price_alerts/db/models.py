"""Database models for the price-alert service.

Only alert state and notification preferences are owned here. The product
table mirrors the catalog for the SQL-backed catalog implementation; users
live in the identity store and are referenced by id only.
"""
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, text
from sqlalchemy.types import TypeDecorator
from sqlmodel import Field, SQLModel

from price_alerts.core.utils import utcnow

_ACTIVE_ONLY = {
    "sqlite_where": text("is_active = 1"),
    "postgresql_where": text("is_active"),
}


class UTCDateTime(TypeDecorator):
    """Timestamp stored as UTC and always read back timezone-aware.

    SQLite keeps no offset, so values coming back without one are UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):  # noqa: ANN001
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):  # noqa: ANN001
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class ProductRow(SQLModel, table=True):
    """Catalog product with its current canonical price."""

    __tablename__ = "product"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str
    current_price: int  # minor units
    currency: str = Field(default="USD", max_length=3)


class PriceAlertRow(SQLModel, table=True):
    """A user's standing price rule for one product."""

    __tablename__ = "price_alert"
    __table_args__ = (
        # At most one active alert per (user, product); enforced by the database.
        Index(
            "uq_price_alert_user_product_active",
            "user_id",
            "product_id",
            unique=True,
            **_ACTIVE_ONLY,
        ),
        Index("ix_price_alert_product_active", "product_id", "is_active"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(index=True)
    product_id: uuid.UUID
    target_price: int  # minor units
    currency: str = Field(default="USD", max_length=3)
    alert_type: str = Field(default="below")  # below | above | percentage
    threshold: float | None = None  # percentage points
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)


class NotificationPreferencesRow(SQLModel, table=True):
    """Per-user delivery settings (1:1 with the user)."""

    __tablename__ = "notification_preferences"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(unique=True, index=True)
    notification_email: bool = Field(default=True)
    notification_push: bool = Field(default=True)
    quiet_hours_start: str | None = None  # HH:MM
    quiet_hours_end: str | None = None  # HH:MM
    timezone: str = Field(default="UTC")
    language: str = Field(default="en")
    currency: str = Field(default="USD", max_length=3)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)


class AnonymousPriceAlertRow(SQLModel, table=True):
    """Price alert registered by e-mail address only, pending verification."""

    __tablename__ = "anonymous_price_alert"
    __table_args__ = (
        Index(
            "uq_anonymous_alert_email_product_active",
            "email",
            "product_id",
            unique=True,
            **_ACTIVE_ONLY,
        ),
        Index("ix_anonymous_alert_verified_active", "is_verified", "is_active"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    email: str = Field(index=True)
    product_id: uuid.UUID = Field(index=True)
    target_price: int
    currency: str = Field(default="USD", max_length=3)
    alert_type: str = Field(default="below")
    threshold: float | None = None
    verification_token: str = Field(unique=True)
    management_token: str = Field(unique=True)
    is_verified: bool = Field(default=False)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
