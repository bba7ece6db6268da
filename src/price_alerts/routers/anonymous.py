"""E-mail-only alerts, managed through the tokens sent by e-mail."""
import logging

from fastapi import APIRouter, Query
from pydantic import EmailStr

from price_alerts.core import AlertErrorMapper, AlertServiceError
from price_alerts.deps import AdminUserDep, AnonymousServiceDep
from price_alerts.schemas import (AnonymousAlertCreate, AnonymousAlertPublic,
                                  AnonymousAlertUpdate, AnonymousPriceAlert)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/anonymous-notifications", tags=["anonymous-notifications"])

_errors = AlertErrorMapper(resource_name="Alert")


def _public(alert: AnonymousPriceAlert) -> dict:
    return AnonymousAlertPublic.model_validate(alert.model_dump()).model_dump(
        mode="json", by_alias=True
    )


@router.post("/alerts", status_code=201)
async def create_alert(body: AnonymousAlertCreate, service: AnonymousServiceDep) -> dict:
    """Register an alert and e-mail the verification link.

    Tokens are never returned here; they only travel by e-mail.
    """
    try:
        alert = await service.create(
            str(body.email),
            body.product_id,
            body.target_price,
            currency=body.currency,
            alert_type=body.alert_type.value,
            threshold=body.threshold,
        )
    except AlertServiceError as exc:
        _errors.raise_http(exc)
    return {
        "message": "Price alert created. Check your e-mail to verify it.",
        "alert": _public(alert),
    }


@router.get("/verify/{token}")
def verify_alert(token: str, service: AnonymousServiceDep) -> dict:
    try:
        alert = service.verify(token)
    except AlertServiceError as exc:
        _errors.raise_http(exc)
    return {"message": "Price alert verified successfully", "alert": _public(alert)}


@router.get("/manage/{token}")
def get_managed_alert(token: str, service: AnonymousServiceDep) -> dict:
    try:
        alert = service.get(token)
    except AlertServiceError as exc:
        _errors.raise_http(exc)
    return {"alert": _public(alert)}


@router.put("/manage/{token}")
def update_managed_alert(
    token: str, body: AnonymousAlertUpdate, service: AnonymousServiceDep
) -> dict:
    try:
        alert = service.update(token, body.changes())
    except AlertServiceError as exc:
        _errors.raise_http(exc)
    return {"message": "Price alert updated successfully", "alert": _public(alert)}


@router.delete("/manage/{token}")
def delete_managed_alert(token: str, service: AnonymousServiceDep) -> dict:
    try:
        service.delete(token)
    except AlertServiceError as exc:
        _errors.raise_http(exc)
    return {"message": "Price alert deleted successfully"}


@router.post("/alerts/{token}/resend-verification")
async def resend_verification(token: str, service: AnonymousServiceDep) -> dict:
    """E-mail the verification link again; 400 once the alert is verified."""
    try:
        await service.resend_verification(token)
    except AlertServiceError as exc:
        _errors.raise_http(exc)
    return {"message": "Verification email sent successfully"}


@router.post("/alerts/{token}/send-management-link")
async def send_management_link(token: str, service: AnonymousServiceDep) -> dict:
    try:
        await service.send_management_link(token)
    except AlertServiceError as exc:
        _errors.raise_http(exc)
    return {"message": "Management link email sent successfully"}


@router.get("/alerts")
def list_alerts_by_email(service: AnonymousServiceDep, email: EmailStr = Query(...)) -> dict:
    alerts = service.list_by_email(str(email))
    return {
        "data": [_public(a) for a in alerts],
        "count": len(alerts),
    }


@router.get("/stats")
def get_stats(_admin: AdminUserDep, service: AnonymousServiceDep) -> dict:
    return {"stats": service.get_stats().model_dump(by_alias=True)}


@router.post("/cleanup")
def cleanup_unverified(_admin: AdminUserDep, service: AnonymousServiceDep) -> dict:
    """Delete unverified alerts older than the verification window."""
    removed = service.cleanup_expired()
    return {"message": "Cleanup complete", "removed": removed}
