"""API routers.

Includes routes for:
- /api/notifications - Account price alerts, stats and price-update ingestion
- /api/user-preferences - The caller's notification preferences
- /api/anonymous-notifications - E-mail-only alerts managed by token
- /ws - Real-time notification channel (WebSocket)
"""
from price_alerts.routers.anonymous import router as anonymous_router
from price_alerts.routers.notifications import router as notifications_router
from price_alerts.routers.preferences import router as preferences_router
from price_alerts.routers.realtime import router as realtime_router

__all__ = [
    "notifications_router",
    "preferences_router",
    "anonymous_router",
    "realtime_router",
]
