"""Integration tests for login, refresh rotation, logout and the session middleware."""

from __future__ import annotations

from tests.factories.user import DEFAULT_PASSWORD, UserFactory
from tests.helpers.utils import bearer, envelope

BASE = "/api/v1/users"


def _login(api, username: str) -> dict:
    resp = api.post(f"{BASE}/login", json={"username": username, "password": DEFAULT_PASSWORD})
    return envelope(resp, 200)["data"]


def _set_cookies(resp) -> dict[str, str]:
    return {h.split("=", 1)[0]: h for h in resp.headers.getlist("Set-Cookie")}


# -------------------------------- Login ----------------------------------- #
def test_login_returns_user_tokens_and_cookies(api, app):
    user = UserFactory(username="bob")

    resp = api.post(f"{BASE}/login", json={"email": user.email, "password": DEFAULT_PASSWORD})
    body = envelope(resp, 200)

    assert body["message"] == "User logged in successfully"
    assert body["data"]["user"]["id"] == user.id
    assert body["data"]["accessToken"] and body["data"]["refreshToken"]

    cookies = _set_cookies(resp)
    for name, token_key in (("accessToken", "accessToken"), ("refreshToken", "refreshToken")):
        header = cookies[name]
        assert header.startswith(f"{name}={body['data'][token_key]};")
        assert "HttpOnly" in header
        assert "Secure" in header
        assert "SameSite=Lax" in header


def test_login_errors(api):
    UserFactory(username="bob")

    missing = api.post(f"{BASE}/login", json={"password": "x"})
    assert envelope(missing, 400)["message"] == "Username or email is required"

    unknown = api.post(f"{BASE}/login", json={"username": "ghost", "password": "x"})
    assert envelope(unknown, 404)["message"] == "User does not exist"

    wrong = api.post(f"{BASE}/login", json={"username": "bob", "password": "nope"})
    assert envelope(wrong, 400)["message"] == "Invalid user credentials"


# ------------------------------- Refresh ---------------------------------- #
def test_refresh_rotation_via_body(api):
    UserFactory(username="bob")
    first = _login(api, "bob")

    resp = api.post(f"{BASE}/refresh-token", json={"refreshToken": first["refreshToken"]})
    body = envelope(resp, 200)
    second = body["data"]
    assert body["message"] == "Access token refreshed"
    assert second["refreshToken"] != first["refreshToken"]
    assert set(_set_cookies(resp)) == {"accessToken", "refreshToken"}

    reuse = api.post(f"{BASE}/refresh-token", json={"refreshToken": first["refreshToken"]})
    assert envelope(reuse, 401)["message"] == "Invalid or expired refresh token"

    again = api.post(f"{BASE}/refresh-token", json={"refreshToken": second["refreshToken"]})
    envelope(again, 200)


def test_refresh_via_cookie(client, api):
    UserFactory(username="bob")
    tokens = _login(api, "bob")

    client.set_cookie("refreshToken", tokens["refreshToken"])
    resp = client.post(f"{BASE}/refresh-token")
    assert envelope(resp, 200)["data"]["refreshToken"] != tokens["refreshToken"]


def test_refresh_requires_token(api):
    resp = api.post(f"{BASE}/refresh-token", json={})
    assert envelope(resp, 400)["message"] == "Refresh token is required"


def test_refresh_rejects_access_token(api):
    UserFactory(username="bob")
    tokens = _login(api, "bob")
    resp = api.post(f"{BASE}/refresh-token", json={"refreshToken": tokens["accessToken"]})
    envelope(resp, 401)


# -------------------------------- Logout ---------------------------------- #
def test_logout_clears_cookies_and_revokes_refresh(api):
    UserFactory(username="bob")
    tokens = _login(api, "bob")

    resp = api.post(f"{BASE}/logout", headers=bearer(tokens["accessToken"]))
    body = envelope(resp, 200)
    assert body["data"] == {}
    cookies = _set_cookies(resp)
    assert cookies["accessToken"].startswith("accessToken=;")
    assert cookies["refreshToken"].startswith("refreshToken=;")
    assert "Max-Age=0" in cookies["refreshToken"]

    after = api.post(f"{BASE}/refresh-token", json={"refreshToken": tokens["refreshToken"]})
    envelope(after, 401)


def test_logout_requires_auth(api):
    assert envelope(api.post(f"{BASE}/logout"), 401)["message"] == "Unauthorized request"


# -------------------------- Session middleware ---------------------------- #
def test_missing_and_invalid_access_token(api):
    missing = api.get(f"{BASE}/getCurrentUser")
    assert envelope(missing, 401)["message"] == "Unauthorized request"

    invalid = api.get(f"{BASE}/getCurrentUser", headers=bearer("garbage"))
    assert envelope(invalid, 401)["message"] == "Invalid access token"


def test_refresh_token_is_not_an_access_token(api):
    UserFactory(username="bob")
    tokens = _login(api, "bob")
    resp = api.get(f"{BASE}/getCurrentUser", headers=bearer(tokens["refreshToken"]))
    assert envelope(resp, 401)["message"] == "Invalid access token"


def test_cookie_wins_over_bearer_header(client, api):
    UserFactory(username="bob")
    UserFactory(username="carla")
    bob = _login(api, "bob")
    carla = _login(api, "carla")

    client.set_cookie("accessToken", bob["accessToken"])
    resp = client.get(f"{BASE}/getCurrentUser", headers=bearer(carla["accessToken"]))
    assert envelope(resp, 200)["data"]["username"] == "bob"


def test_invalid_cookie_is_not_rescued_by_header(client, api):
    UserFactory(username="bob")
    bob = _login(api, "bob")

    client.set_cookie("accessToken", "garbage")
    resp = client.get(f"{BASE}/getCurrentUser", headers=bearer(bob["accessToken"]))
    assert envelope(resp, 401)["message"] == "Invalid access token"


def test_deleted_user_token_rejected(api, session):
    user = UserFactory(username="bob")
    tokens = _login(api, "bob")
    session.delete(user)
    session.commit()

    resp = api.get(f"{BASE}/getCurrentUser", headers=bearer(tokens["accessToken"]))
    assert envelope(resp, 401)["message"] == "Invalid access token"
