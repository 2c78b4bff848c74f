"""User Routes — HTTP surface of the account lifecycle.

Tests cover:
    - register returns 201 with a session token and mails an activation link
    - activation link activates; login then succeeds
    - password recovery over HTTP; outside development the token is only mailed
    - activation links use the configured public URL, not the Host header
    - email path parameters match addresses stored in normalized form
    - own-record lookups: 200 for self, 401 for others, 404 unknown, 400 malformed
    - bodies never expose password hashes or one-time tokens
"""

from uuid import uuid4

import pytest

from tasklist.config import Settings, get_settings
from tasklist.main import app

REGISTRATION = {
    "username": "carol",
    "email": "carol@x.com",
    "password": "pw123",
    "confirmPassword": "pw123",
}


async def test_register_activate_login_over_http(client, mailer):
    res = await client.post("/api/user/register", json=REGISTRATION)
    assert res.status_code == 201
    body = res.json()
    assert body["status"] == 201
    assert body["message"] == "User registered successfully"
    assert body["error"] is None
    assert body["data"]["token"]
    assert body["data"]["user"]["is_activated"] is False

    await mailer.drain()
    link = next(
        line for line in mailer.sent[0].text.splitlines()
        if "/api/user/activate-account/" in line
    )
    assert link.startswith("http://test/api/user/activate-account/")

    res = await client.get(link.removeprefix("http://test"))
    assert res.status_code == 200
    assert res.json()["data"]["is_activated"] is True

    res = await client.post(
        "/api/user/login", json={"email": "carol@x.com", "password": "pw123"},
    )
    assert res.status_code == 200
    assert res.json()["data"]["user"]["username"] == "carol"


async def test_login_before_activation_is_400(client):
    await client.post("/api/user/register", json=REGISTRATION)
    res = await client.post(
        "/api/user/login", json={"email": "carol@x.com", "password": "pw123"},
    )
    assert res.status_code == 400
    assert res.json()["error"]["message"] == (
        "Account is not activated, please check your email"
    )


async def test_register_password_mismatch_is_400(client):
    res = await client.post(
        "/api/user/register", json={**REGISTRATION, "confirmPassword": "nope"},
    )
    assert res.status_code == 400
    assert res.json()["error"]["status"] == 400


async def test_register_invalid_email_is_422(client):
    res = await client.post(
        "/api/user/register", json={**REGISTRATION, "email": "not-an-email"},
    )
    assert res.status_code == 422
    body = res.json()
    assert body["status"] == 422
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert any(d["field"].endswith("email") for d in body["error"]["details"])


async def test_unknown_activation_token_is_404(client):
    res = await client.get("/api/user/activate-account/nope")
    assert res.status_code == 404


async def test_password_recovery_over_http(client, alice):
    res = await client.post("/api/user/send-recover-password-token/alice@x.com")
    assert res.status_code == 200
    token = res.json()["data"]["token"]

    res = await client.post("/api/user/recover-password", json={
        "token": token, "password": "newpw", "confirmPassword": "newpw",
    })
    assert res.status_code == 200

    res = await client.post(
        "/api/user/login", json={"email": "alice@x.com", "password": "newpw"},
    )
    assert res.status_code == 200


@pytest.fixture
def production(client):
    """Run the app with production settings for the duration of a test."""
    app.dependency_overrides[get_settings] = lambda: Settings(
        environment="production", public_base_url="https://tasks.example",
    )


def _mailed_reset_token(text: str) -> str:
    lines = text.splitlines()
    marker = next(i for i, line in enumerate(lines) if "expires in one hour" in line)
    return lines[marker + 2].strip()


async def test_recovery_token_not_returned_outside_development(
    client, alice, mailer, production,
):
    res = await client.post("/api/user/send-recover-password-token/alice@x.com")
    assert res.status_code == 200
    assert res.json()["data"] is None

    await mailer.drain()
    token = _mailed_reset_token(mailer.sent[0].text)
    assert token not in res.text

    res = await client.post("/api/user/recover-password", json={
        "token": token, "password": "newpw", "confirmPassword": "newpw",
    })
    assert res.status_code == 200


async def test_activation_link_ignores_host_header_outside_development(
    client, mailer, production,
):
    res = await client.post(
        "/api/user/register", json=REGISTRATION,
        headers={"Host": "evil.example"},
    )
    assert res.status_code == 201

    await mailer.drain()
    assert "https://tasks.example/api/user/activate-account/" in mailer.sent[0].text
    assert "evil.example" not in mailer.sent[0].text


async def test_recovery_with_mixed_case_domain(client, mailer):
    res = await client.post(
        "/api/user/register",
        json={**REGISTRATION, "email": "carol@Example.COM"},
    )
    assert res.status_code == 201

    res = await client.post("/api/user/send-recover-password-token/carol@Example.COM")
    assert res.status_code == 200
    assert res.json()["data"]["token"]


async def test_email_lookup_with_mixed_case_domain(client):
    res = await client.post(
        "/api/user/register",
        json={**REGISTRATION, "email": "carol@Example.COM"},
    )
    header = {"Authorization": f"Bearer {res.json()['data']['token']}"}

    res = await client.get("/api/user/email/carol@Example.COM", headers=header)
    assert res.status_code == 200
    assert res.json()["data"]["username"] == "carol"


async def test_responses_hide_credentials(client, alice, auth_header):
    res = await client.get(f"/api/user/{alice.id}", headers=auth_header(alice))
    user = res.json()["data"]
    for secret in ("password", "password_hash", "activation_token", "reset_token"):
        assert secret not in user


# ─── own-record lookups ──────────────────────────────────────────

async def test_get_own_user_by_id(client, alice, auth_header):
    res = await client.get(f"/api/user/{alice.id}", headers=auth_header(alice))
    assert res.status_code == 200
    assert res.json()["data"]["id"] == str(alice.id)


async def test_get_other_user_by_id_is_401(client, alice, bob, auth_header):
    res = await client.get(f"/api/user/{bob.id}", headers=auth_header(alice))
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "UNAUTHORIZED"


async def test_get_unknown_user_is_404(client, alice, auth_header):
    res = await client.get(f"/api/user/{uuid4()}", headers=auth_header(alice))
    assert res.status_code == 404


async def test_get_user_with_malformed_id_is_400(client, alice, auth_header):
    res = await client.get("/api/user/123", headers=auth_header(alice))
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_ID"


async def test_lookup_by_username_and_email(client, alice, bob, auth_header):
    headers = auth_header(alice)
    assert (await client.get("/api/user/username/alice", headers=headers)).status_code == 200
    assert (await client.get("/api/user/email/alice@x.com", headers=headers)).status_code == 200
    assert (await client.get("/api/user/username/bob", headers=headers)).status_code == 401
    assert (await client.get("/api/user/email/bob@x.com", headers=headers)).status_code == 401


async def test_lookup_requires_token(client, alice):
    res = await client.get(f"/api/user/{alice.id}")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "INVALID_TOKEN"


async def test_user_listing_search(client, alice, bob, auth_header):
    res = await client.get(
        "/api/user", params={"search": "bo"}, headers=auth_header(alice),
    )
    assert res.status_code == 200
    assert [u["username"] for u in res.json()["data"]] == ["bob"]


async def test_user_listing_bad_sort_is_400(client, alice, auth_header):
    res = await client.get(
        "/api/user", params={"sort": "password"}, headers=auth_header(alice),
    )
    assert res.status_code == 400
