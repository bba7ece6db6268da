"""E-mail-only alerts: registration, verification and token-based management."""
import asyncio
import logging
import uuid
from collections.abc import Mapping
from datetime import timedelta
from typing import Any

from price_alerts.catalog import ProductCatalog
from price_alerts.core.exceptions import (AlreadyVerified, CatalogUnavailable,
                                          EmailDeliveryFailed)
from price_alerts.schemas import AnonymousAlertStats, AnonymousPriceAlert
from price_alerts.store import AnonymousAlertStore
from price_alerts.transport import EmailMessage, EmailTransport
from price_alerts.transport.templates import (anonymous_management_link,
                                              anonymous_verification)

logger = logging.getLogger(__name__)


class AnonymousAlertService:
    def __init__(
        self,
        store: AnonymousAlertStore,
        catalog: ProductCatalog,
        email_transport: EmailTransport,
        frontend_url: str,
        verification_ttl_hours: int = 24,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._email = email_transport
        self._frontend_url = frontend_url.rstrip("/")
        self._ttl_hours = verification_ttl_hours

    async def create(
        self,
        email: str,
        product_id: uuid.UUID,
        target_price: int,
        currency: str = "USD",
        alert_type: str = "below",
        threshold: float | None = None,
    ) -> AnonymousPriceAlert:
        """Store the alert and send the verification e-mail.

        Once the alert is stored, nothing downstream can fail the request: a
        catalog error only costs the product name in the e-mail, and a failed
        e-mail is logged. The owner can ask for it again through
        ``resend_verification``.
        """
        alert = await asyncio.to_thread(
            self._store.create, email, product_id, target_price, currency, alert_type, threshold
        )
        message = self._verification_message(alert, await self._product_name(product_id))
        try:
            await self._send(alert, message)
        except EmailDeliveryFailed as exc:
            logger.error("Verification e-mail for alert %s failed: %s", alert.id, exc)
        return alert

    async def resend_verification(self, management_token: str) -> AnonymousPriceAlert:
        """E-mail the verification link again.

        Raises:
            InvalidToken: no alert has this management token.
            AlreadyVerified: there is nothing left to confirm.
            EmailDeliveryFailed: the mail provider rejected the message.
        """
        alert = await asyncio.to_thread(self._store.get_by_management_token, management_token)
        if alert.is_verified:
            raise AlreadyVerified()
        message = self._verification_message(alert, await self._product_name(alert.product_id))
        await self._send(alert, message)
        logger.info("Re-sent verification e-mail for alert %s", alert.id)
        return alert

    async def send_management_link(self, management_token: str) -> AnonymousPriceAlert:
        """E-mail the management link to the alert's address."""
        alert = await asyncio.to_thread(self._store.get_by_management_token, management_token)
        message = anonymous_management_link(
            product_name=await self._product_name(alert.product_id),
            target_price=alert.target_price,
            currency=alert.currency,
            manage_url=self._manage_url(alert),
        )
        await self._send(alert, message)
        logger.info("Sent management link for alert %s", alert.id)
        return alert

    def verify(self, token: str) -> AnonymousPriceAlert:
        return self._store.verify(token)

    def get(self, management_token: str) -> AnonymousPriceAlert:
        return self._store.get_by_management_token(management_token)

    def update(self, management_token: str, changes: Mapping[str, Any]) -> AnonymousPriceAlert:
        return self._store.update(management_token, changes)

    def delete(self, management_token: str) -> None:
        self._store.delete(management_token)

    def list_by_email(self, email: str) -> list[AnonymousPriceAlert]:
        return self._store.list_by_email(email)

    def get_stats(self) -> AnonymousAlertStats:
        return self._store.get_stats()

    def cleanup_expired(self) -> int:
        return self._store.cleanup_expired(timedelta(hours=self._ttl_hours))

    def _manage_url(self, alert: AnonymousPriceAlert) -> str:
        return f"{self._frontend_url}/alerts/manage/{alert.management_token}"

    def _verification_message(
        self, alert: AnonymousPriceAlert, product_name: str
    ) -> EmailMessage:
        return anonymous_verification(
            product_name=product_name,
            target_price=alert.target_price,
            currency=alert.currency,
            verify_url=f"{self._frontend_url}/alerts/verify/{alert.verification_token}",
            manage_url=self._manage_url(alert),
            ttl_hours=self._ttl_hours,
        )

    async def _product_name(self, product_id: uuid.UUID) -> str:
        try:
            product = await self._catalog.fetch_product(product_id)
        except CatalogUnavailable as exc:
            logger.warning("Product lookup for %s failed: %s", product_id, exc)
            return str(product_id)
        return product.name if product is not None else str(product_id)

    async def _send(self, alert: AnonymousPriceAlert, message: EmailMessage) -> None:
        try:
            await asyncio.to_thread(self._email.send, alert.email, message)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            raise EmailDeliveryFailed(str(exc)) from exc
