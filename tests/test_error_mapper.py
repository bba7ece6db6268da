import uuid

import pytest
from fastapi import HTTPException

from price_alerts.core import (AlertErrorMapper, AlreadyVerified,
                               CatalogUnavailable, DuplicateActiveAlert,
                               EmailDeliveryFailed, InvalidToken,
                               NotFoundOrForbidden, PreferencesNotFound,
                               ProductNotFound)

mapper = AlertErrorMapper(resource_name="Alert")


@pytest.mark.parametrize(
    "exc, status",
    [
        (DuplicateActiveAlert(), 409),
        (ProductNotFound(uuid.uuid4()), 404),
        (NotFoundOrForbidden(), 404),
        (PreferencesNotFound(), 404),
        (InvalidToken(), 404),
        (AlreadyVerified(), 400),
        (CatalogUnavailable("timeout"), 502),
        (EmailDeliveryFailed("smtp down"), 502),
        (RuntimeError("boom"), 500),
    ],
)
def test_status_codes(exc, status):
    assert mapper.to_http(exc)[0] == status


def test_invalid_token_names_the_resource():
    assert mapper.to_http(InvalidToken("Invalid management token")) == (
        404,
        "Alert not found: Invalid management token",
    )


def test_raise_http_chains_the_cause():
    exc = NotFoundOrForbidden()

    with pytest.raises(HTTPException) as info:
        mapper.raise_http(exc)

    assert info.value.status_code == 404
    assert info.value.detail == "Alert not found or access denied"
    assert info.value.__cause__ is exc
