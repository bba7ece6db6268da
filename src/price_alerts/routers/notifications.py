"""Account price alerts, preference lookup, stats and price-update ingestion.

All routes require a bearer token; stats and price updates are admin-only.
"""
import logging
import uuid

from fastapi import APIRouter, HTTPException, Query

from price_alerts.core import AlertErrorMapper, AlertServiceError
from price_alerts.deps import (AdminUserDep, AlertStoreDep, CurrentUserDep,
                               NotificationServiceDep, RegistryDep)
from price_alerts.schemas import AlertCreate, AlertUpdate, PriceUpdateEvent

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/notifications", tags=["notifications"])

_errors = AlertErrorMapper(resource_name="Alert")


@router.post("/alerts", status_code=201)
def create_alert(body: AlertCreate, user: CurrentUserDep, store: AlertStoreDep) -> dict:
    """Create a price alert for the caller.

    404 when the product is unknown, 409 when an active alert for the same
    product already exists.
    """
    try:
        alert = store.create_alert(
            user.user_id,
            body.product_id,
            body.target_price,
            currency=body.currency,
            alert_type=body.alert_type.value,
            threshold=body.threshold,
        )
    except AlertServiceError as exc:
        _errors.raise_http(exc)
    return {
        "message": "Price alert created successfully",
        "alert": alert.model_dump(mode="json", by_alias=True),
    }


@router.get("/alerts")
def list_alerts(
    user: CurrentUserDep,
    store: AlertStoreDep,
    include_inactive: bool = Query(default=False, alias="includeInactive"),
) -> dict:
    alerts = store.list_alerts_for_user(user.user_id, include_inactive=include_inactive)
    return {
        "message": "Price alerts retrieved successfully",
        "data": [a.model_dump(mode="json", by_alias=True) for a in alerts],
        "count": len(alerts),
    }


@router.put("/alerts/{alert_id}")
def update_alert(
    alert_id: uuid.UUID, body: AlertUpdate, user: CurrentUserDep, store: AlertStoreDep
) -> dict:
    try:
        alert = store.update_alert(alert_id, user.user_id, body.changes())
    except AlertServiceError as exc:
        _errors.raise_http(exc)
    return {
        "message": "Price alert updated successfully",
        "alert": alert.model_dump(mode="json", by_alias=True),
    }


@router.delete("/alerts/{alert_id}")
def delete_alert(alert_id: uuid.UUID, user: CurrentUserDep, store: AlertStoreDep) -> dict:
    try:
        store.delete_alert(alert_id, user.user_id)
    except AlertServiceError as exc:
        _errors.raise_http(exc)
    return {"message": "Price alert deleted successfully"}


@router.get("/preferences/{user_id}")
def get_user_preferences(user_id: uuid.UUID, user: CurrentUserDep, store: AlertStoreDep) -> dict:
    """Read another user's preferences (self or admin only); never creates them."""
    if user_id != user.user_id and not user.is_admin:
        raise HTTPException(status_code=403, detail="Access denied")
    preferences = store.get_preferences(user_id)
    if preferences is None:
        raise HTTPException(status_code=404, detail="User preferences not found")
    return {"preferences": preferences.model_dump(mode="json", by_alias=True)}


@router.get("/stats")
def get_stats(_admin: AdminUserDep, store: AlertStoreDep, registry: RegistryDep) -> dict:
    stats = store.get_stats().model_dump(by_alias=True)
    stats["connections"] = registry.stats()
    return {"stats": stats}


@router.post("/price-updates")
async def ingest_price_update(
    event: PriceUpdateEvent, _admin: AdminUserDep, service: NotificationServiceDep
) -> dict:
    """Evaluate all active alerts of a product against a new price and deliver.

    Synchronous per event: the response is sent after every triggered alert
    has been dispatched.
    """
    result = await service.handle_price_update(event.product_id, event.current_price)
    return {"message": "Price update processed", "result": result.to_dict()}
