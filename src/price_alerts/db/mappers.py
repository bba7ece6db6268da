"""Row-to-record mapping.

One function per entity; nullable columns map to ``None`` and nothing else
is coerced, so callers never handle ORM rows directly.
"""
from price_alerts.db.models import (AnonymousPriceAlertRow,
                                    NotificationPreferencesRow, PriceAlertRow,
                                    ProductRow)
from price_alerts.schemas import (AnonymousPriceAlert, NotificationPreferences,
                                  PriceAlert, Product)


def product_from_row(row: ProductRow) -> Product:
    return Product(
        id=row.id,
        name=row.name,
        current_price=row.current_price,
        currency=row.currency,
    )


def alert_from_row(row: PriceAlertRow) -> PriceAlert:
    return PriceAlert(
        id=row.id,
        user_id=row.user_id,
        product_id=row.product_id,
        target_price=row.target_price,
        currency=row.currency,
        alert_type=row.alert_type,
        threshold=row.threshold,
        is_active=row.is_active,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def preferences_from_row(row: NotificationPreferencesRow) -> NotificationPreferences:
    return NotificationPreferences(
        id=row.id,
        user_id=row.user_id,
        notification_email=row.notification_email,
        notification_push=row.notification_push,
        quiet_hours_start=row.quiet_hours_start,
        quiet_hours_end=row.quiet_hours_end,
        timezone=row.timezone,
        language=row.language,
        currency=row.currency,
    )


def anonymous_alert_from_row(row: AnonymousPriceAlertRow) -> AnonymousPriceAlert:
    return AnonymousPriceAlert(
        id=row.id,
        email=row.email,
        product_id=row.product_id,
        target_price=row.target_price,
        currency=row.currency,
        alert_type=row.alert_type,
        threshold=row.threshold,
        verification_token=row.verification_token,
        management_token=row.management_token,
        is_verified=row.is_verified,
        is_active=row.is_active,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
