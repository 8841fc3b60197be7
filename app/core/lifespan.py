"""Application state and lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (token service,
password hasher, OTP sender, rate-limit counters, DB engine).

init_app_state() runs inside create_app() and does no I/O, so the app is
usable under transports that skip lifespan events. The lifespan handles
logging, optional table creation and closing connections.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import Settings, get_settings
from app.core.limiter import RateLimiter
from app.infrastructure.cache import InMemoryCounterStore, RedisCounterStore
from app.infrastructure.external.email import build_otp_sender
from app.infrastructure.persistence import database
from app.infrastructure.security import BcryptPasswordHasher, TokenService
from app.shared.telemetry import setup_logging

logger = logging.getLogger(__name__)


def init_app_state(app: FastAPI, settings: Settings) -> None:
    """Attach per-app services to app.state. Redis clients connect lazily."""
    app.state.token_service = TokenService.from_settings(settings)
    app.state.password_hasher = BcryptPasswordHasher()
    app.state.otp_sender = build_otp_sender(settings)
    if settings.rate_limit_storage == "redis":
        store: InMemoryCounterStore | RedisCounterStore = RedisCounterStore.from_settings(
            settings
        )
    else:
        store = InMemoryCounterStore()
    app.state.rate_limiter = RateLimiter(store, enabled=settings.rate_limit_enabled)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: logging, optional table creation. Shutdown: Redis counter
    client close, SQL engine dispose.
    """
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    logger.info("OTP delivery: %s", settings.otp_delivery)
    if not settings.rate_limit_enabled:
        logger.warning("Rate limiting is disabled (RATE_LIMIT_ENABLED=false)")
    if settings.database_auto_create:
        await database.init_models()
    logger.info(
        "%s %s started (%s)", settings.app_name, settings.app_version, settings.environment
    )

    yield

    # ---- Shutdown ----
    limiter = getattr(app.state, "rate_limiter", None)
    if limiter is not None and isinstance(limiter.store, RedisCounterStore):
        await limiter.store.close()
        logger.info("Rate-limit Redis client closed")

    await database.dispose_engine()
    logger.info("Database engine disposed")
