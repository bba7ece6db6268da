"""Service layer: trigger evaluation, delivery and orchestration."""
from price_alerts.services.anonymous_service import AnonymousAlertService
from price_alerts.services.dispatcher import (Channel, Delivered,
                                              DispatchOutcome,
                                              NotificationDispatcher,
                                              Suppressed, SuppressionReason,
                                              is_in_quiet_hours)
from price_alerts.services.evaluator import AlertEvaluator, should_trigger
from price_alerts.services.notification_service import (NotificationService,
                                                        PriceUpdateResult)

__all__ = [
    "AlertEvaluator",
    "AnonymousAlertService",
    "Channel",
    "Delivered",
    "DispatchOutcome",
    "NotificationDispatcher",
    "NotificationService",
    "PriceUpdateResult",
    "Suppressed",
    "SuppressionReason",
    "is_in_quiet_hours",
    "should_trigger",
]
