"""Persistence for e-mail-only (anonymous) price alerts.

An anonymous alert carries two opaque tokens: the verification token, sent
once to prove ownership of the address, and the management token, used for
every later read, update or delete. Only verified and active alerts are ever
evaluated.
"""
import logging
import secrets
import uuid
from collections.abc import Mapping
from datetime import timedelta
from typing import Any

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, func, select

from price_alerts.catalog import ProductCatalog
from price_alerts.core.exceptions import (DuplicateActiveAlert, InvalidToken,
                                          ProductNotFound)
from price_alerts.core.utils import utcnow
from price_alerts.db.mappers import anonymous_alert_from_row
from price_alerts.db.models import AnonymousPriceAlertRow
from price_alerts.db.sessions import session_scope
from price_alerts.schemas import AnonymousAlertStats, AnonymousPriceAlert

logger = logging.getLogger(__name__)

_MERGED_FIELDS = ("target_price", "currency", "alert_type", "is_active")


def new_token() -> str:
    """URL-safe random token for verification and management links."""
    return secrets.token_urlsafe(32)


class AnonymousAlertStore:
    def __init__(self, engine: Engine, catalog: ProductCatalog) -> None:
        self._engine = engine
        self._catalog = catalog

    def create(
        self,
        email: str,
        product_id: uuid.UUID,
        target_price: int,
        currency: str = "USD",
        alert_type: str = "below",
        threshold: float | None = None,
    ) -> AnonymousPriceAlert:
        """Register an unverified alert for an e-mail address.

        Raises:
            ProductNotFound: the catalog does not know product_id.
            DuplicateActiveAlert: the address already watches this product.
        """
        if self._catalog.get_product(product_id) is None:
            raise ProductNotFound(product_id)

        row = AnonymousPriceAlertRow(
            email=email.strip().lower(),
            product_id=product_id,
            target_price=target_price,
            currency=currency,
            alert_type=alert_type,
            threshold=threshold,
            verification_token=new_token(),
            management_token=new_token(),
        )
        try:
            with session_scope(self._engine) as session:
                session.add(row)
                session.flush()
                alert = anonymous_alert_from_row(row)
        except IntegrityError as exc:
            raise DuplicateActiveAlert(
                "An active alert already exists for this email and product"
            ) from exc
        logger.info("Created anonymous alert %s (pending verification)", alert.id)
        return alert

    def verify(self, verification_token: str) -> AnonymousPriceAlert:
        """Mark the alert verified. Verifying twice is harmless."""
        with session_scope(self._engine) as session:
            row = session.exec(
                select(AnonymousPriceAlertRow).where(
                    AnonymousPriceAlertRow.verification_token == verification_token
                )
            ).first()
            if row is None:
                raise InvalidToken("Invalid verification token")
            if not row.is_verified:
                row.is_verified = True
                row.updated_at = utcnow()
                session.add(row)
                session.flush()
                logger.info("Verified anonymous alert %s", row.id)
            return anonymous_alert_from_row(row)

    def get_by_management_token(self, management_token: str) -> AnonymousPriceAlert:
        with session_scope(self._engine) as session:
            return anonymous_alert_from_row(_managed_row(session, management_token))

    def update(
        self, management_token: str, changes: Mapping[str, Any]
    ) -> AnonymousPriceAlert:
        """Merge provided fields; threshold is replaced like on account alerts."""
        try:
            with session_scope(self._engine) as session:
                row = _managed_row(session, management_token)
                for field in _MERGED_FIELDS:
                    value = changes.get(field)
                    if value is not None:
                        setattr(row, field, value)
                row.threshold = changes.get("threshold")
                row.updated_at = utcnow()
                session.add(row)
                session.flush()
                return anonymous_alert_from_row(row)
        except IntegrityError as exc:
            raise DuplicateActiveAlert(
                "An active alert already exists for this email and product"
            ) from exc

    def delete(self, management_token: str) -> None:
        with session_scope(self._engine) as session:
            row = _managed_row(session, management_token)
            session.delete(row)
        logger.info("Deleted anonymous alert via management token")

    def list_by_email(self, email: str) -> list[AnonymousPriceAlert]:
        """All alerts of an address, newest first."""
        statement = (
            select(AnonymousPriceAlertRow)
            .where(AnonymousPriceAlertRow.email == email.strip().lower())
            .order_by(col(AnonymousPriceAlertRow.created_at).desc())
        )
        with session_scope(self._engine) as session:
            return [anonymous_alert_from_row(row) for row in session.exec(statement)]

    def list_active_verified_for_product(
        self, product_id: uuid.UUID
    ) -> list[AnonymousPriceAlert]:
        statement = (
            select(AnonymousPriceAlertRow)
            .where(
                AnonymousPriceAlertRow.product_id == product_id,
                col(AnonymousPriceAlertRow.is_active).is_(True),
                col(AnonymousPriceAlertRow.is_verified).is_(True),
            )
            .order_by(
                col(AnonymousPriceAlertRow.created_at), col(AnonymousPriceAlertRow.id)
            )
        )
        with session_scope(self._engine) as session:
            return [anonymous_alert_from_row(row) for row in session.exec(statement)]

    def get_stats(self) -> AnonymousAlertStats:
        with session_scope(self._engine) as session:
            total = session.exec(
                select(func.count()).select_from(AnonymousPriceAlertRow)
            ).one()
            active = session.exec(
                select(func.count())
                .select_from(AnonymousPriceAlertRow)
                .where(col(AnonymousPriceAlertRow.is_active).is_(True))
            ).one()
            verified = session.exec(
                select(func.count())
                .select_from(AnonymousPriceAlertRow)
                .where(col(AnonymousPriceAlertRow.is_verified).is_(True))
            ).one()
            emails = session.exec(
                select(func.count(func.distinct(AnonymousPriceAlertRow.email)))
            ).one()
        return AnonymousAlertStats(
            total_alerts=total,
            active_alerts=active,
            verified_alerts=verified,
            total_emails=emails,
        )

    def cleanup_expired(self, ttl: timedelta) -> int:
        """Delete unverified alerts older than ttl; returns how many were removed."""
        cutoff = utcnow() - ttl
        with session_scope(self._engine) as session:
            rows = session.exec(
                select(AnonymousPriceAlertRow).where(
                    col(AnonymousPriceAlertRow.is_verified).is_(False),
                    col(AnonymousPriceAlertRow.created_at) < cutoff,
                )
            ).all()
            for row in rows:
                session.delete(row)
        if rows:
            logger.info("Removed %d unverified anonymous alerts", len(rows))
        return len(rows)


def _managed_row(session: Session, management_token: str) -> AnonymousPriceAlertRow:
    row = session.exec(
        select(AnonymousPriceAlertRow).where(
            AnonymousPriceAlertRow.management_token == management_token
        )
    ).first()
    if row is None:
        raise InvalidToken("Invalid management token")
    return row
