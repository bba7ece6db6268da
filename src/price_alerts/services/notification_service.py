"""Price-update handling: evaluate alerts, then deliver what triggered.

Evaluation and delivery are not transactional. An alert that triggers is
delivered at most once per price event and a failed delivery is not retried.
"""
import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any

from price_alerts.catalog import ProductCatalog
from price_alerts.core.exceptions import CatalogUnavailable
from price_alerts.schemas import AnonymousPriceAlert
from price_alerts.services.dispatcher import DispatchOutcome, NotificationDispatcher
from price_alerts.services.evaluator import AlertEvaluator, should_trigger
from price_alerts.store import AlertStore
from price_alerts.transport import EmailTransport
from price_alerts.transport.templates import price_alert_triggered

logger = logging.getLogger(__name__)


@dataclass
class PriceUpdateResult:
    product_id: uuid.UUID
    current_price: int
    outcomes: dict[uuid.UUID, DispatchOutcome] = field(default_factory=dict)
    anonymous_notified: list[uuid.UUID] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "productId": str(self.product_id),
            "currentPrice": self.current_price,
            "triggered": len(self.outcomes),
            "outcomes": [
                {"alertId": str(alert_id), **outcome.to_dict()}
                for alert_id, outcome in self.outcomes.items()
            ],
            "anonymousNotified": [str(a) for a in self.anonymous_notified],
        }


class NotificationService:
    def __init__(
        self,
        store: AlertStore,
        evaluator: AlertEvaluator,
        dispatcher: NotificationDispatcher,
        catalog: ProductCatalog,
        email_transport: EmailTransport,
        frontend_url: str = "",
    ) -> None:
        self._store = store
        self._evaluator = evaluator
        self._dispatcher = dispatcher
        self._catalog = catalog
        self._email = email_transport
        self._frontend_url = frontend_url.rstrip("/")

    async def handle_price_update(
        self, product_id: uuid.UUID, current_price: int
    ) -> PriceUpdateResult:
        """Evaluate every active alert of the product and deliver the triggered ones.

        Alerts are dispatched one after another in (created_at, id) order; a
        failure in one delivery does not affect the others.
        """
        result = PriceUpdateResult(product_id=product_id, current_price=current_price)

        triggered = await asyncio.to_thread(
            self._evaluator.triggered_alerts, product_id, current_price
        )
        for alert in triggered:
            result.outcomes[alert.id] = await self._dispatcher.dispatch(alert, current_price)

        anonymous = await asyncio.to_thread(
            self._evaluator.triggered_anonymous_alerts, product_id, current_price
        )
        if anonymous:
            product_name = await self._product_name(product_id)
            for alert in anonymous:
                if await self._email_anonymous(alert, product_name, current_price):
                    result.anonymous_notified.append(alert.id)

        logger.info(
            "Price update %s -> %d: %d alert(s) triggered, %d anonymous e-mail(s)",
            product_id,
            current_price,
            len(result.outcomes),
            len(result.anonymous_notified),
        )
        return result

    async def check_alert(self, alert_id: uuid.UUID, current_price: int) -> bool:
        """Whether a stored alert would trigger at current_price (inactive: never)."""
        alert = await asyncio.to_thread(self._store.find_alert, alert_id)
        if alert is None or not alert.is_active:
            return False
        return should_trigger(alert, current_price)

    async def _product_name(self, product_id: uuid.UUID) -> str:
        try:
            product = await self._catalog.fetch_product(product_id)
        except CatalogUnavailable as exc:
            logger.warning("Product lookup for %s failed: %s", product_id, exc)
            return str(product_id)
        return product.name if product is not None else str(product_id)

    async def _email_anonymous(
        self, alert: AnonymousPriceAlert, product_name: str, current_price: int
    ) -> bool:
        message = price_alert_triggered(
            product_name,
            current_price,
            alert.target_price,
            alert.currency,
            manage_url=f"{self._frontend_url}/alerts/manage/{alert.management_token}",
        )
        try:
            await asyncio.to_thread(self._email.send, alert.email, message)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.error("E-mail for anonymous alert %s failed: %s", alert.id, exc)
            return False
        return True
