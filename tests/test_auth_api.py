"""Auth API tests — registration, login, and the bearer-token guard.

Learn: Tests cover:
1. User registration + duplicate prevention
2. Login → JWT access token, with no hint about which part was wrong
3. The guard's split: 401 for no/malformed header, 403 for a bad token
4. Protected /me endpoint
"""

from datetime import datetime, timedelta, timezone

import pytest

from pagevault.auth.jwt import create_access_token
from pagevault.config import Settings


# ═══════════════════════════════════════════════════════════
# Registration
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_register_user(client):
    r = await client.post(
        "/api/register", json={"email": "alice@example.com", "password": "pw1"}
    )
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "User created successfully."
    assert isinstance(body["userId"], int)
    assert "password" not in r.text


@pytest.mark.asyncio
async def test_register_duplicate_email(client):
    """Second registration fails with 409 whatever the password."""
    r1 = await client.post(
        "/api/register", json={"email": "dup@example.com", "password": "pw1"}
    )
    assert r1.status_code == 201

    r2 = await client.post(
        "/api/register", json={"email": "dup@example.com", "password": "other"}
    )
    assert r2.status_code == 409
    assert r2.json() == {"message": "Email already in use."}


@pytest.mark.asyncio
async def test_register_duplicate_email_ignores_case(client):
    await client.post("/api/register", json={"email": "Case@Example.com", "password": "pw1"})
    r = await client.post(
        "/api/register", json={"email": "case@example.com ", "password": "pw1"}
    )
    assert r.status_code == 409


@pytest.mark.asyncio
async def test_register_long_email(client):
    email = "a" * 300 + "@example.com"
    r = await client.post("/api/register", json={"email": email, "password": "pw1"})
    assert r.status_code == 201
    r = await client.post("/api/login", json={"email": email, "password": "pw1"})
    assert r.status_code == 200


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {},
        {"email": "a@example.com"},
        {"password": "pw1"},
        {"email": "", "password": "pw1"},
        {"email": "a@example.com", "password": ""},
    ],
)
async def test_register_missing_fields(client, body):
    r = await client.post("/api/register", json=body)
    assert r.status_code == 400
    assert "message" in r.json()


# ═══════════════════════════════════════════════════════════
# Login
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_login_success(client):
    await client.post("/api/register", json={"email": "alice@example.com", "password": "pw1"})

    r = await client.post("/api/login", json={"email": "alice@example.com", "password": "pw1"})
    assert r.status_code == 200
    body = r.json()
    assert body["accessToken"]
    assert body["tokenType"] == "bearer"


@pytest.mark.asyncio
async def test_login_email_is_case_insensitive(client):
    await client.post("/api/register", json={"email": "alice@example.com", "password": "pw1"})
    r = await client.post("/api/login", json={"email": "ALICE@example.com", "password": "pw1"})
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_wrong_password_and_unknown_email_are_indistinguishable(client):
    await client.post("/api/register", json={"email": "alice@example.com", "password": "pw1"})

    wrong_pw = await client.post(
        "/api/login", json={"email": "alice@example.com", "password": "nope"}
    )
    unknown = await client.post(
        "/api/login", json={"email": "nobody@example.com", "password": "pw1"}
    )
    assert wrong_pw.status_code == unknown.status_code == 401
    assert wrong_pw.json() == unknown.json() == {"message": "Invalid credentials."}


@pytest.mark.asyncio
async def test_login_missing_fields(client):
    r = await client.post("/api/login", json={"email": "alice@example.com"})
    assert r.status_code == 400


# ═══════════════════════════════════════════════════════════
# Guard + /me
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_me_with_token(client, signup):
    headers = await signup("me@example.com")
    r = await client.get("/api/me", headers=headers)
    assert r.status_code == 200
    assert r.json()["email"] == "me@example.com"
    assert isinstance(r.json()["id"], int)


@pytest.mark.asyncio
async def test_me_without_token(client):
    r = await client.get("/api/me")
    assert r.status_code == 401
    assert r.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "header",
    ["Token abc", "Bearer", "Bearer a b", "abc"],
)
async def test_malformed_authorization_header(client, header):
    r = await client.get("/api/me", headers={"Authorization": header})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_invalid_token_forbidden(client):
    r = await client.get("/api/me", headers={"Authorization": "Bearer invalid_token_here"})
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_expired_token_forbidden(client, settings):
    issued = datetime.now(timezone.utc) - timedelta(minutes=61)
    token = create_access_token(1, "alice@example.com", settings, issued_at=issued)
    r = await client.get("/api/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_token_signed_with_other_secret_forbidden(client, settings):
    other = Settings(
        database_url=settings.database_url,
        jwt_secret="someone-elses-secret-0123456789abcdef",
    )
    token = create_access_token(1, "alice@example.com", other)
    r = await client.get("/api/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_token_valid_before_expiry(client, settings):
    """A token near the end of its hour still resolves to its subject."""
    issued = datetime.now(timezone.utc) - timedelta(minutes=59)
    token = create_access_token(5, "eve@example.com", settings, issued_at=issued)
    r = await client.get("/api/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json() == {"id": 5, "email": "eve@example.com"}
