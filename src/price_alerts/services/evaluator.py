"""Trigger rules for price alerts."""
import logging
import uuid
from typing import Protocol

from price_alerts.schemas import AlertType, AnonymousPriceAlert, PriceAlert
from price_alerts.store import AlertStore, AnonymousAlertStore

logger = logging.getLogger(__name__)


class _Rule(Protocol):
    target_price: int
    alert_type: str
    threshold: float | None


def should_trigger(alert: _Rule, current_price: int) -> bool:
    """Return whether the alert's rule is satisfied by the price sample.

    Percentage alerts fire when the price is at least ``threshold`` percent
    away from the target in either direction. A percentage alert without a
    threshold, or with a zero target, never fires. Unknown types never fire.
    """
    if alert.alert_type == AlertType.BELOW.value:
        return current_price <= alert.target_price
    if alert.alert_type == AlertType.ABOVE.value:
        return current_price >= alert.target_price
    if alert.alert_type == AlertType.PERCENTAGE.value:
        if alert.threshold is None or alert.target_price == 0:
            return False
        change = abs((current_price - alert.target_price) / alert.target_price * 100)
        return change >= alert.threshold
    return False


class AlertEvaluator:
    """Select the alerts of a product that trigger for a new price."""

    def __init__(
        self,
        store: AlertStore,
        anonymous_store: AnonymousAlertStore | None = None,
    ) -> None:
        self._store = store
        self._anonymous_store = anonymous_store

    def triggered_alerts(self, product_id: uuid.UUID, current_price: int) -> list[PriceAlert]:
        candidates = self._store.list_active_alerts_for_product(product_id)
        triggered = [a for a in candidates if should_trigger(a, current_price)]
        logger.debug(
            "Product %s at %d: %d of %d active alerts triggered",
            product_id,
            current_price,
            len(triggered),
            len(candidates),
        )
        return triggered

    def triggered_anonymous_alerts(
        self, product_id: uuid.UUID, current_price: int
    ) -> list[AnonymousPriceAlert]:
        if self._anonymous_store is None:
            return []
        candidates = self._anonymous_store.list_active_verified_for_product(product_id)
        return [a for a in candidates if should_trigger(a, current_price)]
