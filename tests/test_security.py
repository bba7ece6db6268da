import uuid

import pytest
from jose import jwt

from price_alerts.security import (InvalidCredentials, create_access_token,
                                   decode_access_token)

SECRET = "test-secret"


def test_roundtrip_carries_role():
    user_id = uuid.uuid4()

    user = decode_access_token(create_access_token(user_id, SECRET, role="admin"), SECRET)

    assert user.user_id == user_id
    assert user.is_admin is True


def test_user_id_claim_is_accepted():
    user_id = uuid.uuid4()
    token = jwt.encode({"userId": str(user_id)}, SECRET, algorithm="HS256")

    user = decode_access_token(token, SECRET)

    assert user.user_id == user_id
    assert user.is_admin is False


@pytest.mark.parametrize(
    "token",
    [
        "garbage",
        create_access_token(uuid.uuid4(), "other-secret"),
        create_access_token(uuid.uuid4(), SECRET, minutes=-5),
        jwt.encode({"sub": "not-a-uuid"}, SECRET, algorithm="HS256"),
        jwt.encode({"role": "admin"}, SECRET, algorithm="HS256"),
    ],
)
def test_rejected_tokens(token):
    with pytest.raises(InvalidCredentials):
        decode_access_token(token, SECRET)
