"""Persistence for account price alerts and notification preferences.

The one-active-alert-per-(user, product) rule is enforced by a partial unique
index; this module only translates the violation into DuplicateActiveAlert.
"""
import logging
import uuid
from collections.abc import Mapping
from typing import Any

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, func, select

from price_alerts.catalog import ProductCatalog
from price_alerts.core.exceptions import (DuplicateActiveAlert,
                                          NotFoundOrForbidden,
                                          PreferencesNotFound, ProductNotFound)
from price_alerts.core.utils import utcnow
from price_alerts.db.mappers import alert_from_row, preferences_from_row
from price_alerts.db.models import NotificationPreferencesRow, PriceAlertRow
from price_alerts.db.sessions import session_scope
from price_alerts.schemas import AlertStats, NotificationPreferences, PriceAlert

logger = logging.getLogger(__name__)

# Fields an update may overwrite when present and non-null.
_MERGED_ALERT_FIELDS = ("target_price", "currency", "alert_type", "is_active")

# Quiet-hour bounds may be cleared explicitly, so null is a real value for them.
_NULLABLE_PREFERENCE_FIELDS = frozenset({"quiet_hours_start", "quiet_hours_end"})
_PREFERENCE_FIELDS = (
    "notification_email",
    "notification_push",
    "quiet_hours_start",
    "quiet_hours_end",
    "timezone",
    "language",
    "currency",
)
DEFAULT_PREFERENCES: dict[str, Any] = {
    "notification_email": True,
    "notification_push": True,
    "quiet_hours_start": None,
    "quiet_hours_end": None,
    "timezone": "UTC",
    "language": "en",
    "currency": "USD",
}


class AlertStore:
    """CRUD over PriceAlert and NotificationPreferences records."""

    def __init__(self, engine: Engine, catalog: ProductCatalog) -> None:
        self._engine = engine
        self._catalog = catalog

    # ---- Alerts ----
    def create_alert(
        self,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        target_price: int,
        currency: str = "USD",
        alert_type: str = "below",
        threshold: float | None = None,
    ) -> PriceAlert:
        """Create an active alert.

        Raises:
            ProductNotFound: the catalog does not know product_id.
            DuplicateActiveAlert: the user already has an active alert for it.
        """
        if self._catalog.get_product(product_id) is None:
            raise ProductNotFound(product_id)

        row = PriceAlertRow(
            user_id=user_id,
            product_id=product_id,
            target_price=target_price,
            currency=currency,
            alert_type=alert_type,
            threshold=threshold,
            is_active=True,
        )
        try:
            with session_scope(self._engine) as session:
                session.add(row)
                session.flush()
                alert = alert_from_row(row)
        except IntegrityError as exc:
            raise DuplicateActiveAlert(
                "User already has an active alert for this product"
            ) from exc
        logger.info("Created %s alert %s for user %s", alert_type, alert.id, user_id)
        return alert

    def update_alert(
        self,
        alert_id: uuid.UUID,
        user_id: uuid.UUID,
        changes: Mapping[str, Any],
    ) -> PriceAlert:
        """Apply a partial update to an owned alert.

        Only provided fields are merged, except threshold: it is replaced on
        every update and becomes null unless the update carries it.

        Raises:
            NotFoundOrForbidden: no alert with that id belongs to user_id.
            DuplicateActiveAlert: re-activating while another alert is active.
        """
        try:
            with session_scope(self._engine) as session:
                row = _owned_alert(session, alert_id, user_id)
                for field in _MERGED_ALERT_FIELDS:
                    value = changes.get(field)
                    if value is not None:
                        setattr(row, field, value)
                row.threshold = changes.get("threshold")
                row.updated_at = utcnow()
                session.add(row)
                session.flush()
                alert = alert_from_row(row)
        except IntegrityError as exc:
            raise DuplicateActiveAlert(
                "User already has an active alert for this product"
            ) from exc
        logger.info("Updated alert %s (%s)", alert_id, ", ".join(sorted(changes)) or "no fields")
        return alert

    def delete_alert(self, alert_id: uuid.UUID, user_id: uuid.UUID) -> None:
        """Delete an owned alert. Raises NotFoundOrForbidden, also on a repeat call."""
        with session_scope(self._engine) as session:
            row = _owned_alert(session, alert_id, user_id)
            session.delete(row)
        logger.info("Deleted alert %s for user %s", alert_id, user_id)

    def get_alert(self, alert_id: uuid.UUID, user_id: uuid.UUID) -> PriceAlert:
        with session_scope(self._engine) as session:
            return alert_from_row(_owned_alert(session, alert_id, user_id))

    def find_alert(self, alert_id: uuid.UUID) -> PriceAlert | None:
        """Unscoped lookup for internal callers (no ownership check)."""
        with session_scope(self._engine) as session:
            row = session.get(PriceAlertRow, alert_id)
            return alert_from_row(row) if row is not None else None

    def list_alerts_for_user(
        self, user_id: uuid.UUID, include_inactive: bool = False
    ) -> list[PriceAlert]:
        statement = select(PriceAlertRow).where(PriceAlertRow.user_id == user_id)
        if not include_inactive:
            statement = statement.where(col(PriceAlertRow.is_active).is_(True))
        statement = statement.order_by(
            col(PriceAlertRow.created_at).desc(), col(PriceAlertRow.id)
        )
        with session_scope(self._engine) as session:
            return [alert_from_row(row) for row in session.exec(statement)]

    def list_active_alerts_for_product(self, product_id: uuid.UUID) -> list[PriceAlert]:
        """Active alerts for a product in stable (created_at, id) order."""
        statement = (
            select(PriceAlertRow)
            .where(
                PriceAlertRow.product_id == product_id,
                col(PriceAlertRow.is_active).is_(True),
            )
            .order_by(col(PriceAlertRow.created_at), col(PriceAlertRow.id))
        )
        with session_scope(self._engine) as session:
            return [alert_from_row(row) for row in session.exec(statement)]

    # ---- Preferences ----
    def get_preferences(self, user_id: uuid.UUID) -> NotificationPreferences | None:
        """Return the user's preferences, or None when never configured."""
        with session_scope(self._engine) as session:
            row = _preferences_row(session, user_id)
            return preferences_from_row(row) if row is not None else None

    def get_or_create_preferences(self, user_id: uuid.UUID) -> NotificationPreferences:
        existing = self.get_preferences(user_id)
        if existing is not None:
            return existing
        try:
            with session_scope(self._engine) as session:
                row = NotificationPreferencesRow(user_id=user_id, **DEFAULT_PREFERENCES)
                session.add(row)
                session.flush()
                return preferences_from_row(row)
        except IntegrityError:
            # Created concurrently by another request.
            created = self.get_preferences(user_id)
            if created is None:
                raise
            return created

    def upsert_preferences(
        self, user_id: uuid.UUID, changes: Mapping[str, Any]
    ) -> NotificationPreferences:
        """Merge provided fields into the user's preferences, creating them if needed."""
        updates = {
            field: changes[field]
            for field in _PREFERENCE_FIELDS
            if field in changes
            and (changes[field] is not None or field in _NULLABLE_PREFERENCE_FIELDS)
        }
        with session_scope(self._engine) as session:
            row = _preferences_row(session, user_id)
            if row is None:
                row = NotificationPreferencesRow(
                    user_id=user_id, **(DEFAULT_PREFERENCES | updates)
                )
            else:
                for field, value in updates.items():
                    setattr(row, field, value)
                row.updated_at = utcnow()
            session.add(row)
            session.flush()
            return preferences_from_row(row)

    def reset_preferences(self, user_id: uuid.UUID) -> NotificationPreferences:
        """Restore defaults. Raises PreferencesNotFound when none exist."""
        with session_scope(self._engine) as session:
            row = _preferences_row(session, user_id)
            if row is None:
                raise PreferencesNotFound()
            for field, value in DEFAULT_PREFERENCES.items():
                setattr(row, field, value)
            row.updated_at = utcnow()
            session.add(row)
            session.flush()
            return preferences_from_row(row)

    # ---- Stats ----
    def get_stats(self) -> AlertStats:
        """Aggregate counts; users are those known through alerts or preferences."""
        with session_scope(self._engine) as session:
            total = session.exec(select(func.count()).select_from(PriceAlertRow)).one()
            active = session.exec(
                select(func.count())
                .select_from(PriceAlertRow)
                .where(col(PriceAlertRow.is_active).is_(True))
            ).one()
            alert_users = set(session.exec(select(PriceAlertRow.user_id).distinct()))
            pref_users = set(
                session.exec(select(NotificationPreferencesRow.user_id).distinct())
            )
        return AlertStats(
            total_alerts=total,
            active_alerts=active,
            total_users=len(alert_users | pref_users),
        )


def _owned_alert(session: Session, alert_id: uuid.UUID, user_id: uuid.UUID) -> PriceAlertRow:
    row = session.exec(
        select(PriceAlertRow).where(
            PriceAlertRow.id == alert_id, PriceAlertRow.user_id == user_id
        )
    ).first()
    if row is None:
        raise NotFoundOrForbidden()
    return row


def _preferences_row(
    session: Session, user_id: uuid.UUID
) -> NotificationPreferencesRow | None:
    return session.exec(
        select(NotificationPreferencesRow).where(
            NotificationPreferencesRow.user_id == user_id
        )
    ).first()
