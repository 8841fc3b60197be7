"""Fixed-window counter stores for the rate limiter.

InMemoryCounterStore serves a single process; RedisCounterStore shares
counters across workers and instances.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from collections.abc import Callable

import redis.asyncio as redis

logger = logging.getLogger(__name__)

KEY_PREFIX = "ratelimit:"


class InMemoryCounterStore:
    """Process-local counters. A window opens at the first hit and resets once elapsed."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._windows: dict[str, tuple[int, float]] = {}
        self._lock = asyncio.Lock()

    async def incr(self, key: str, window_seconds: int) -> tuple[int, int]:
        async with self._lock:
            now = self._clock()
            count, reset_at = self._windows.get(key, (0, 0.0))
            if now >= reset_at:
                count, reset_at = 0, now + window_seconds
            count += 1
            self._windows[key] = (count, reset_at)
            self._evict_expired(now)
        return count, max(math.ceil(reset_at - now), 1)

    def _evict_expired(self, now: float) -> None:
        # Sweep only once the table is large.
        if len(self._windows) < 10_000:
            return
        for stale in [k for k, (_, reset_at) in self._windows.items() if reset_at <= now]:
            del self._windows[stale]

    def reset(self) -> None:
        self._windows.clear()


class RedisCounterStore:
    """Counters in Redis: INCR, EXPIRE NX and TTL in one MULTI/EXEC."""

    def __init__(self, client: redis.Redis) -> None:
        self._redis = client

    @classmethod
    def from_settings(cls, settings) -> RedisCounterStore:
        client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=(
                settings.redis_password.get_secret_value()
                if settings.redis_password
                else None
            ),
            decode_responses=True,
            socket_connect_timeout=5,
            socket_keepalive=True,
        )
        logger.info(
            "Rate limit counters in Redis at %s:%s", settings.redis_host, settings.redis_port
        )
        return cls(client)

    async def incr(self, key: str, window_seconds: int) -> tuple[int, int]:
        full_key = f"{KEY_PREFIX}{key}"
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.incr(full_key)
            pipe.expire(full_key, window_seconds, nx=True)
            pipe.ttl(full_key)
            count, _, ttl = await pipe.execute()
        return int(count), int(ttl) if ttl and ttl > 0 else window_seconds

    async def close(self) -> None:
        await self._redis.aclose()
