"""Database package: models, session management and row mapping."""
from price_alerts.db.models import (AnonymousPriceAlertRow,
                                    NotificationPreferencesRow, PriceAlertRow,
                                    ProductRow)

__all__ = [
    "AnonymousPriceAlertRow",
    "NotificationPreferencesRow",
    "PriceAlertRow",
    "ProductRow",
]
