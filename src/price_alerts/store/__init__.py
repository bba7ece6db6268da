"""Alert persistence."""
from price_alerts.store.alert_store import DEFAULT_PREFERENCES, AlertStore
from price_alerts.store.anonymous_store import AnonymousAlertStore

__all__ = ["AlertStore", "AnonymousAlertStore", "DEFAULT_PREFERENCES"]
