import pytest

URL = "/api/user-preferences"


@pytest.fixture
def headers(auth_headers, user_id):
    return auth_headers(user_id)


def test_get_creates_defaults(client, headers, user_id):
    resp = client.get(URL, headers=headers)

    assert resp.status_code == 200
    prefs = resp.json()["preferences"]
    assert prefs["userId"] == str(user_id)
    assert prefs["notificationEmail"] is True
    assert prefs["notificationPush"] is True
    assert prefs["quietHoursStart"] is None
    assert prefs["timezone"] == "UTC"
    assert prefs["language"] == "en"
    assert prefs["currency"] == "USD"


def test_patch_sets_quiet_hours(client, headers):
    resp = client.patch(
        URL, json={"quietHoursStart": "22:00", "quietHoursEnd": "06:00"}, headers=headers
    )

    assert resp.status_code == 200
    prefs = resp.json()["preferences"]
    assert (prefs["quietHoursStart"], prefs["quietHoursEnd"]) == ("22:00", "06:00")
    assert prefs["notificationPush"] is True


def test_patch_clears_quiet_hours(client, headers):
    client.patch(URL, json={"quietHoursStart": "22:00", "quietHoursEnd": "06:00"}, headers=headers)

    resp = client.patch(URL, json={"quietHoursStart": None, "quietHoursEnd": None}, headers=headers)

    assert resp.json()["preferences"]["quietHoursStart"] is None


@pytest.mark.parametrize(
    "body",
    [
        {"quietHoursStart": "22:00"},
        {"quietHoursStart": "22:00", "quietHoursEnd": None},
        {"quietHoursStart": "25:00", "quietHoursEnd": "06:00"},
        {"quietHoursStart": "22:60", "quietHoursEnd": "06:00"},
        {"timezone": ""},
        {"language": "e"},
        {"currency": "EURO"},
    ],
)
def test_invalid_preferences_rejected(client, headers, body):
    resp = client.patch(URL, json=body, headers=headers)

    assert resp.status_code == 400
    assert resp.json()["error"] == "Validation failed"


def test_patch_without_fields(client, headers):
    assert client.patch(URL, json={}, headers=headers).status_code == 400


def test_put_upserts(client, headers):
    resp = client.put(URL, json={"notificationEmail": False, "language": "de"}, headers=headers)

    assert resp.status_code == 200
    prefs = resp.json()["preferences"]
    assert prefs["notificationEmail"] is False
    assert prefs["language"] == "de"


def test_delete_resets_to_defaults(client, headers):
    assert client.delete(URL, headers=headers).status_code == 404

    client.put(URL, json={"notificationPush": False, "currency": "EUR"}, headers=headers)
    resp = client.delete(URL, headers=headers)

    assert resp.status_code == 200
    prefs = resp.json()["preferences"]
    assert prefs["notificationPush"] is True
    assert prefs["currency"] == "USD"


def test_requires_authentication(client):
    assert client.get(URL).status_code == 401
