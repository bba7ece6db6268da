"""Pydantic schemas for API and runtime use. Not persisted to DB."""
from price_alerts.schemas.messages import PriceAlertPayload, RealtimeMessage
from price_alerts.schemas.records import (AlertStats, AlertType,
                                          AnonymousAlertPublic,
                                          AnonymousAlertStats,
                                          AnonymousPriceAlert, CamelModel,
                                          NotificationPreferences, PriceAlert,
                                          Product)
from price_alerts.schemas.requests import (AlertCreate, AlertUpdate,
                                           AnonymousAlertCreate,
                                           AnonymousAlertUpdate,
                                           PreferencesUpdate, PriceUpdateEvent)

__all__ = [
    "AlertCreate",
    "AlertStats",
    "AlertType",
    "AlertUpdate",
    "AnonymousAlertCreate",
    "AnonymousAlertPublic",
    "AnonymousAlertStats",
    "AnonymousAlertUpdate",
    "AnonymousPriceAlert",
    "CamelModel",
    "NotificationPreferences",
    "PreferencesUpdate",
    "PriceAlert",
    "PriceAlertPayload",
    "PriceUpdateEvent",
    "Product",
    "RealtimeMessage",
]
