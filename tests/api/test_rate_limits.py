"""Tests for per-route rate-limit policies and the global ceiling over HTTP."""

import pytest
from httpx import AsyncClient

from app.core.limiter import AUTH, PASSWORD_RESET, REGISTRATION

pytestmark = pytest.mark.requires_db

LOGIN = "/api/v1/auth/login"


async def test_login_limit_is_per_email_and_counts_failures(
    client: AsyncClient, officer, create_user
) -> None:
    other = await create_user("other@example.com")
    bad = {"email": officer.email, "password": "wrong-password"}
    for _ in range(AUTH.max_requests):
        response = await client.post(LOGIN, json=bad)
        assert response.status_code == 401

    blocked = await client.post(LOGIN, json={"email": officer.email, "password": "Password123!"})
    assert blocked.status_code == 429
    assert blocked.json() == {"success": False, "message": AUTH.message, "statusCode": 429}
    assert 0 < int(blocked.headers["Retry-After"]) <= AUTH.window_seconds

    # Same client, different email: separate budget.
    allowed = await client.post(LOGIN, json={"email": other.email, "password": "Password123!"})
    assert allowed.status_code == 200


async def test_email_key_is_case_insensitive(client: AsyncClient, officer) -> None:
    for i in range(AUTH.max_requests):
        email = officer.email.upper() if i % 2 else officer.email
        await client.post(LOGIN, json={"email": email, "password": "wrong-password"})
    response = await client.post(
        LOGIN, json={"email": "Officer@Example.com", "password": "Password123!"}
    )
    assert response.status_code == 429


async def test_password_reset_limit(client: AsyncClient, officer) -> None:
    for _ in range(PASSWORD_RESET.max_requests):
        response = await client.post(
            "/api/v1/auth/forgot-password", json={"email": officer.email}
        )
        assert response.status_code == 200
    blocked = await client.post("/api/v1/auth/forgot-password", json={"email": officer.email})
    assert blocked.status_code == 429
    assert blocked.json()["message"] == PASSWORD_RESET.message


async def test_rejected_requests_do_not_reach_the_handler(
    client: AsyncClient, officer, otp_sender
) -> None:
    for _ in range(PASSWORD_RESET.max_requests + 2):
        await client.post("/api/v1/auth/forgot-password", json={"email": officer.email})
    assert len(otp_sender.sent) == PASSWORD_RESET.max_requests


async def test_disabled_limiter_allows_everything(app, client: AsyncClient, officer) -> None:
    app.state.rate_limiter.enabled = False
    for _ in range(AUTH.max_requests + 3):
        response = await client.post(LOGIN, json={"email": officer.email, "password": "wrong-pw1"})
        assert response.status_code == 401


async def test_global_ceiling_uses_rate_limit_envelope(tmp_path, monkeypatch) -> None:
    """GLOBAL_RATE_LIMIT applies to every route, including health."""
    from httpx import ASGITransport

    from app.core.config import get_settings
    from app.core.limiter import GLOBAL
    from app.main import create_app

    monkeypatch.setenv("GLOBAL_RATE_LIMIT", "2/minute")
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'g.db'}")
    get_settings.cache_clear()
    try:
        application = create_app()
        transport = ASGITransport(app=application)
        async with AsyncClient(transport=transport, base_url="https://test") as ac:
            assert (await ac.get("/api/v1/health")).status_code == 200
            assert (await ac.get("/api/v1/health")).status_code == 200
            blocked = await ac.get("/api/v1/health")
    finally:
        get_settings.cache_clear()
    assert blocked.status_code == 429
    assert blocked.json() == {"success": False, "message": GLOBAL.message, "statusCode": 429}
    assert int(blocked.headers["Retry-After"]) >= 1


async def test_ip_limit_ignores_client_supplied_forwarded_for(
    client: AsyncClient, admin, auth_headers
) -> None:
    statuses = []
    for i in range(REGISTRATION.max_requests + 1):
        response = await client.post(
            "/api/v1/users",
            json={
                "email": f"staff{i}@example.com",
                "firstName": "Staff",
                "lastName": "Member",
                "role": "OFFICER",
            },
            headers={**auth_headers(admin), "X-Forwarded-For": f"198.51.100.{i}"},
        )
        statuses.append(response.status_code)
    assert statuses == [201] * REGISTRATION.max_requests + [429]


async def test_forwarded_for_honoured_from_trusted_proxy(tmp_path, monkeypatch) -> None:
    """With TRUSTED_PROXIES set, each forwarded client gets its own budget."""
    from httpx import ASGITransport

    from app.core.config import get_settings
    from app.main import create_app

    monkeypatch.setenv("GLOBAL_RATE_LIMIT", "1/minute")
    monkeypatch.setenv("TRUSTED_PROXIES", "127.0.0.1")
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'p.db'}")
    get_settings.cache_clear()
    try:
        application = create_app()
        transport = ASGITransport(app=application, client=("127.0.0.1", 123))
        async with AsyncClient(transport=transport, base_url="https://test") as ac:
            statuses = [
                (
                    await ac.get("/api/v1/health", headers={"X-Forwarded-For": f"203.0.113.{i}"})
                ).status_code
                for i in range(3)
            ]
            repeat = await ac.get("/api/v1/health", headers={"X-Forwarded-For": "203.0.113.0"})
    finally:
        get_settings.cache_clear()
    assert statuses == [200, 200, 200]
    assert repeat.status_code == 429
