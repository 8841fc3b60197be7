"""Rate limiting: per-route policies plus a slowapi global ceiling.

Policy limits are FastAPI dependencies (rate_limit(AUTH) etc.) backed by the
counter store on app.state.rate_limiter. The global ceiling is a slowapi
Limiter built per app in build_global_limiter() and enforced by
SlowAPIMiddleware. Both share the 429 envelope in exception_handlers.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from fastapi import Request
from slowapi import Limiter

from app.domain.exceptions import RateLimitExceededException, TokenError
from app.shared.request_context import client_ip, extract_bearer_token
from app.shared.utils.sanitization import normalize_email

if TYPE_CHECKING:
    from app.application.interfaces.services import ICounterStore
    from app.core.config import Settings

logger = logging.getLogger(__name__)

KeySource = Literal["email", "ip", "identity"]


@dataclass(frozen=True)
class RateLimitPolicy:
    """A fixed-window budget: max_requests per window_seconds per key."""

    name: str
    max_requests: int
    window_seconds: int
    message: str
    key_source: KeySource


AUTH = RateLimitPolicy(
    "auth", 5, 15 * 60,
    "Too many login attempts. Please try again after 15 minutes.", "email",
)
PASSWORD_RESET = RateLimitPolicy(
    "password-reset", 3, 60 * 60,
    "Too many password reset requests. Please try again in 1 hour.", "email",
)
REGISTRATION = RateLimitPolicy(
    "register", 3, 60 * 60,
    "Registration limit exceeded. Please try again later.", "ip",
)
FILE_UPLOAD = RateLimitPolicy(
    "file-upload", 50, 60 * 60,
    "File upload limit exceeded. Please try again in 1 hour.", "identity",
)
SEARCH = RateLimitPolicy(
    "search", 30, 60,
    "Too many search requests. Please wait a moment.", "identity",
)
UPDATE = RateLimitPolicy(
    "update", 5, 60,
    "Too many update requests. Please slow down.", "identity",
)
DELETE = RateLimitPolicy(
    "delete", 10, 5 * 60,
    "Too many delete requests. Please wait a moment.", "identity",
)
GLOBAL = RateLimitPolicy(
    "global", 100, 15 * 60,
    "Too many requests. Please try again in 15 minutes.", "identity",
)
STRICT = RateLimitPolicy(
    "strict", 5, 60 * 60,
    "Too many attempts. Please try again in 1 hour.", "identity",
)

POLICIES: dict[str, RateLimitPolicy] = {
    p.name: p
    for p in (AUTH, PASSWORD_RESET, REGISTRATION, FILE_UPLOAD, SEARCH, UPDATE, DELETE, GLOBAL, STRICT)
}


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    count: int
    limit: int
    retry_after: int

    @property
    def remaining(self) -> int:
        return max(self.limit - self.count, 0)


class RateLimiter:
    """Count hits per "{policy}:{identifier}" and reject once a window's budget is spent.

    Failed attempts count the same as successful ones; windows reset only
    by elapsing.
    """

    def __init__(self, store: ICounterStore, enabled: bool = True) -> None:
        self.store = store
        self.enabled = enabled

    async def hit(self, policy: RateLimitPolicy, identifier: str) -> RateLimitDecision:
        key = f"{policy.name}:{identifier}"
        count, ttl = await self.store.incr(key, policy.window_seconds)
        return RateLimitDecision(
            allowed=count <= policy.max_requests,
            count=count,
            limit=policy.max_requests,
            retry_after=ttl,
        )

    async def check(self, policy: RateLimitPolicy, identifier: str) -> RateLimitDecision:
        """hit() and raise RateLimitExceededException when rejected."""
        decision = await self.hit(policy, identifier)
        if not decision.allowed:
            logger.warning(
                "Rate limit %s exceeded for %s (%d/%d)",
                policy.name,
                identifier,
                decision.count,
                policy.max_requests,
            )
            raise RateLimitExceededException(policy.name, policy.message, decision.retry_after)
        return decision


async def _email_from_body(request: Request) -> str | None:
    # FastAPI has already read the body by the time dependencies run; this hits the cache.
    try:
        body = await request.json()
    except (ValueError, UnicodeDecodeError):
        return None
    if isinstance(body, dict):
        email = body.get("email")
        if isinstance(email, str) and email.strip():
            return normalize_email(email)
    return None


def identity_from_request(request: Request) -> str | None:
    """Authenticated user id: set by get_current_user, else the access token subject."""
    user_id = getattr(request.state, "user_id", None)
    if user_id:
        return user_id
    tokens = getattr(request.app.state, "token_service", None)
    if tokens is None:
        return None
    token = extract_bearer_token(request)
    if not token:
        return None
    try:
        return tokens.verify_access_token(token).user_id
    except TokenError:
        return None


async def resolve_rate_limit_key(request: Request, policy: RateLimitPolicy) -> str:
    """Identifier for policy: email or identity when available, client IP otherwise."""
    identifier: str | None = None
    if policy.key_source == "email":
        identifier = await _email_from_body(request)
    elif policy.key_source == "identity":
        identifier = identity_from_request(request)
    return identifier or client_ip(request)


def rate_limit(policy: RateLimitPolicy) -> Callable[[Request], Awaitable[None]]:
    """Dependency factory: Depends(rate_limit(AUTH)) on a route."""

    async def _dependency(request: Request) -> None:
        limiter: RateLimiter | None = getattr(request.app.state, "rate_limiter", None)
        if limiter is None or not limiter.enabled:
            return
        identifier = await resolve_rate_limit_key(request, policy)
        await limiter.check(policy, identifier)

    _dependency.__name__ = f"rate_limit_{policy.name.replace('-', '_')}"
    return _dependency


def global_limit_key(request: Request) -> str:
    """slowapi key: the access token subject, else the client IP."""
    identity = identity_from_request(request)
    return f"user:{identity}" if identity else f"ip:{client_ip(request)}"


def _storage_uri(settings: Settings) -> str:
    if settings.rate_limit_storage != "redis":
        return "memory://"
    password = (
        f":{settings.redis_password.get_secret_value()}@" if settings.redis_password else ""
    )
    return f"redis://{password}{settings.redis_host}:{settings.redis_port}/{settings.redis_db}"


def build_global_limiter(settings: Settings) -> Limiter:
    """Per-app slowapi Limiter applying GLOBAL_RATE_LIMIT to every route."""
    return Limiter(
        key_func=global_limit_key,
        default_limits=[settings.global_rate_limit],
        storage_uri=_storage_uri(settings),
        enabled=settings.rate_limit_enabled,
        headers_enabled=False,
    )
