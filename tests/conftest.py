"""Pytest configuration and fixtures for authgate.

HTTP tests build a fresh app per test over a file SQLite database in
tmp_path, so rate-limit counters and rows never leak between tests.
All imports use app.*.
"""

import os
from collections.abc import AsyncIterator, Awaitable, Callable

# Settings validate on first use; the app module builds an app at import.
os.environ.setdefault("JWT_SECRET", "test-access-secret-0123456789abcdef")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-refresh-secret-0123456789abcdef")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.application.dtos.user import UserCreate, UserResult
from app.core.config import get_settings
from app.infrastructure.external.email import ConsoleOtpSender
from app.infrastructure.persistence import database
from app.infrastructure.persistence.repositories import UserRepository
from app.infrastructure.security import BcryptPasswordHasher, TokenService

TEST_PASSWORD = "Password123!"

# Low cost factor keeps bcrypt out of the test runtime.
FAST_HASHER = BcryptPasswordHasher(rounds=4)


@pytest.fixture
def token_service() -> TokenService:
    """TokenService with the test secrets (same keys as the app under test)."""
    return TokenService.from_settings(get_settings())


@pytest.fixture
async def app(tmp_path, monkeypatch) -> AsyncIterator[FastAPI]:
    """Fresh app on an empty file database with fast hashing and a capturing OTP sender."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'authgate.db'}")
    get_settings.cache_clear()
    await database.dispose_engine()

    from app.main import create_app

    application = create_app()
    await database.init_models()
    application.state.password_hasher = FAST_HASHER
    application.state.otp_sender = ConsoleOtpSender()
    yield application

    await database.dispose_engine()
    get_settings.cache_clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI).

    https so the Secure auth cookies are stored and sent back.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="https://test") as ac:
        yield ac


@pytest.fixture
def otp_sender(app: FastAPI) -> ConsoleOtpSender:
    return app.state.otp_sender


@pytest.fixture
def last_otp(otp_sender: ConsoleOtpSender) -> Callable[[str], str]:
    """Return the most recent code sent to an email."""

    def _last(email: str) -> str:
        codes = [code for sent_to, code in otp_sender.sent if sent_to == email]
        assert codes, f"no OTP sent to {email}"
        return codes[-1]

    return _last


@pytest.fixture
def create_user(app: FastAPI) -> Callable[..., Awaitable[UserResult]]:
    """Insert a user directly (bypassing the API and its rate limits)."""

    async def _create(
        email: str,
        role: str = "OFFICER",
        password: str | None = TEST_PASSWORD,
        is_active: bool = True,
    ) -> UserResult:
        database._ensure_engine()
        assert database.AsyncSessionLocal is not None
        async with database.AsyncSessionLocal() as session:
            async with session.begin():
                repo = UserRepository(session)
                hashed = await FAST_HASHER.hash(password) if password else None
                user = await repo.create_user(
                    UserCreate(
                        email=email,
                        role=role,
                        first_name="Test",
                        last_name="User",
                    ),
                    hashed,
                )
                if not is_active:
                    user = await repo.set_status(user.id, False)
        assert user is not None
        return user

    return _create


@pytest.fixture
def auth_headers(
    token_service: TokenService,
) -> Callable[[UserResult], dict[str, str]]:
    """Bearer header for a user, minted directly (no login round-trip)."""

    def _headers(user: UserResult) -> dict[str, str]:
        token = token_service.create_access_token(user.id, user.role)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
async def admin(create_user) -> UserResult:
    return await create_user("admin@example.com", role="ADMIN")


@pytest.fixture
async def officer(create_user) -> UserResult:
    return await create_user("officer@example.com", role="OFFICER")
