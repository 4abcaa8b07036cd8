"""App-level tests — health, middleware, error rendering, settings."""

import pytest
from sqlalchemy.exc import OperationalError

from pagevault.config import Settings


@pytest.mark.asyncio
async def test_health_returns_ok(client):
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert data["server"] == "ok"
    assert data["database"] == "ok"
    assert "version" in data


@pytest.mark.asyncio
async def test_security_headers(client):
    r = await client.get("/api/health")
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"
    assert r.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
    assert r.headers["Cache-Control"] == "no-store"
    assert "Strict-Transport-Security" not in r.headers


@pytest.mark.asyncio
async def test_request_id_generated(client):
    r1 = await client.get("/api/health")
    r2 = await client.get("/api/health")
    assert r1.headers["X-Request-ID"] != r2.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_propagated(client):
    r = await client.get("/api/health", headers={"X-Request-ID": "trace-12345"})
    assert r.headers["X-Request-ID"] == "trace-12345"


@pytest.mark.asyncio
async def test_validation_errors_are_400(client):
    r = await client.post("/api/register", json={"email": "a@example.com"})
    assert r.status_code == 400
    body = r.json()
    assert body["message"] == "Invalid request data"
    assert any(e["field"] == "body.password" for e in body["errors"])


@pytest.mark.asyncio
async def test_database_failure_is_opaque_500(app, client, signup):
    headers = await signup("alice@example.com")
    await app.state.db.drop_all()

    r = await client.get("/api/pages", headers=headers)
    assert r.status_code == 500
    assert r.json() == {"message": "Internal server error"}


@pytest.mark.asyncio
async def test_health_degraded_when_database_down(app, client, monkeypatch):
    async def broken_ping():
        raise OperationalError("SELECT 1", {}, Exception("down"))

    monkeypatch.setattr(app.state.db, "ping", broken_ping)
    r = await client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["status"] == "degraded"
    assert r.json()["database"] == "error"


def test_default_secret_rejected_outside_development():
    with pytest.raises(ValueError):
        Settings(environment="production", jwt_secret="change-me-in-production")


def test_custom_secret_accepted_in_production():
    s = Settings(environment="production", jwt_secret="a-real-secret-value-0123456789abcdef")
    assert s.access_token_expire_minutes == 60
    assert s.bcrypt_rounds == 10


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("PAGEVAULT_JWT_SECRET", "from-env-secret-0123456789abcdef")
    monkeypatch.setenv("PAGEVAULT_ACCESS_TOKEN_EXPIRE_MINUTES", "15")
    s = Settings()
    assert s.jwt_secret == "from-env-secret-0123456789abcdef"
    assert s.access_token_expire_minutes == 15
