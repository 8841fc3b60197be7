"""Counter stores backing the per-identity rate limiter."""

from app.infrastructure.cache.counter_store import (
    InMemoryCounterStore,
    RedisCounterStore,
)

__all__ = ["InMemoryCounterStore", "RedisCounterStore"]
