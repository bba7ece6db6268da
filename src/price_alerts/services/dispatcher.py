"""Deliver triggered alerts according to the owner's preferences.

Store and catalog lookups run off the event loop; only the push sends are
awaited on it.
"""
import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from price_alerts.catalog import ProductCatalog
from price_alerts.core.exceptions import CatalogUnavailable
from price_alerts.core.utils import minutes_since_midnight, parse_hhmm
from price_alerts.schemas import PriceAlert, PriceAlertPayload, RealtimeMessage
from price_alerts.store import AlertStore
from price_alerts.transport import ConnectionRegistry, EmailTransport
from price_alerts.transport.templates import price_alert_triggered

logger = logging.getLogger(__name__)


class Channel(str, Enum):
    PUSH = "push"
    EMAIL = "email"


class SuppressionReason(str, Enum):
    NO_PREFERENCES = "no_preferences"
    QUIET_HOURS = "quiet_hours"


@dataclass(frozen=True)
class Delivered:
    channels: list[Channel] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"status": "delivered", "channels": [c.value for c in self.channels]}


@dataclass(frozen=True)
class Suppressed:
    reason: SuppressionReason

    def to_dict(self) -> dict[str, Any]:
        return {"status": "suppressed", "reason": self.reason.value}


DispatchOutcome = Delivered | Suppressed


def is_in_quiet_hours(start: str | None, end: str | None, now: datetime) -> bool:
    """Whether ``now`` falls inside the [start, end] wall-clock window.

    Both bounds are inclusive. When start is later than end the window wraps
    past midnight (22:00-06:00 covers 23:30 and 05:00). A missing bound means
    no quiet hours.
    """
    if not start or not end:
        return False
    current = minutes_since_midnight(now)
    start_minutes = parse_hhmm(start)
    end_minutes = parse_hhmm(end)
    if start_minutes <= end_minutes:
        return start_minutes <= current <= end_minutes
    return current >= start_minutes or current <= end_minutes


class NotificationDispatcher:
    """Routes one triggered alert to the owner's enabled channels."""

    def __init__(
        self,
        store: AlertStore,
        catalog: ProductCatalog,
        registry: ConnectionRegistry,
        email_transport: EmailTransport,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            store: Source of the owner's notification preferences.
            catalog: Resolves the product name shown in the notification.
            registry: Connected real-time sessions (push channel).
            email_transport: E-mail channel.
            clock: Wall clock used for quiet hours; server local time by default.
        """
        self._store = store
        self._catalog = catalog
        self._registry = registry
        self._email = email_transport
        self._clock = clock

    async def dispatch(self, alert: PriceAlert, current_price: int) -> DispatchOutcome:
        preferences = await asyncio.to_thread(self._store.get_preferences, alert.user_id)
        if preferences is None:
            logger.info("Alert %s suppressed: user %s has no preferences", alert.id, alert.user_id)
            return Suppressed(SuppressionReason.NO_PREFERENCES)

        if is_in_quiet_hours(
            preferences.quiet_hours_start, preferences.quiet_hours_end, self._clock()
        ):
            logger.info("Alert %s suppressed: quiet hours for user %s", alert.id, alert.user_id)
            return Suppressed(SuppressionReason.QUIET_HOURS)

        product_name = await self._product_name(alert)
        channels: list[Channel] = []

        if preferences.notification_push:
            channels.append(Channel.PUSH)
            await self._push(alert, product_name, current_price)

        if preferences.notification_email:
            channels.append(Channel.EMAIL)
            await self._send_email(alert, product_name, current_price)

        return Delivered(channels)

    async def _product_name(self, alert: PriceAlert) -> str:
        try:
            product = await self._catalog.fetch_product(alert.product_id)
        except CatalogUnavailable as exc:
            logger.warning("Product lookup for alert %s failed: %s", alert.id, exc)
            product = None
        return product.name if product is not None else str(alert.product_id)

    async def _push(self, alert: PriceAlert, product_name: str, current_price: int) -> None:
        payload = PriceAlertPayload(
            alert_id=alert.id,
            product_id=alert.product_id,
            product_name=product_name,
            target_price=alert.target_price,
            current_price=current_price,
            currency=alert.currency,
            alert_type=alert.alert_type,
            threshold=alert.threshold,
        )
        message = RealtimeMessage(
            type="price_alert", data=payload.model_dump(mode="json", by_alias=True)
        )
        try:
            sent = await self._registry.broadcast(message.to_json())
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.error("Push for alert %s failed: %s", alert.id, exc)
            return
        logger.info("Pushed alert %s to %d session(s)", alert.id, sent)

    async def _send_email(
        self, alert: PriceAlert, product_name: str, current_price: int
    ) -> None:
        message = price_alert_triggered(
            product_name, current_price, alert.target_price, alert.currency
        )
        try:
            await asyncio.to_thread(self._email.send_to_user, alert.user_id, message)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.error("E-mail for alert %s failed: %s", alert.id, exc)
