"""The caller's own notification preferences."""
from fastapi import APIRouter, HTTPException

from price_alerts.core import AlertErrorMapper, AlertServiceError
from price_alerts.deps import AlertStoreDep, CurrentUserDep
from price_alerts.schemas import PreferencesUpdate

router = APIRouter(prefix="/api/user-preferences", tags=["preferences"])

_errors = AlertErrorMapper(resource_name="Preferences")


@router.get("")
def get_preferences(user: CurrentUserDep, store: AlertStoreDep) -> dict:
    """Return preferences, creating defaults on first access."""
    preferences = store.get_or_create_preferences(user.user_id)
    return {"preferences": preferences.model_dump(mode="json", by_alias=True)}


@router.put("")
def replace_preferences(body: PreferencesUpdate, user: CurrentUserDep, store: AlertStoreDep) -> dict:
    preferences = store.upsert_preferences(user.user_id, body.changes())
    return {
        "message": "Preferences updated successfully",
        "preferences": preferences.model_dump(mode="json", by_alias=True),
    }


@router.patch("")
def patch_preferences(body: PreferencesUpdate, user: CurrentUserDep, store: AlertStoreDep) -> dict:
    changes = body.changes()
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    preferences = store.upsert_preferences(user.user_id, changes)
    return {
        "message": "Preferences updated successfully",
        "preferences": preferences.model_dump(mode="json", by_alias=True),
    }


@router.delete("")
def reset_preferences(user: CurrentUserDep, store: AlertStoreDep) -> dict:
    try:
        preferences = store.reset_preferences(user.user_id)
    except AlertServiceError as exc:
        _errors.raise_http(exc)
    return {
        "message": "Preferences reset to defaults",
        "preferences": preferences.model_dump(mode="json", by_alias=True),
    }
