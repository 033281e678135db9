"""
Async Redis client shared by every service that keeps state in the cache.

One connection pool per process: the client is created lazily on the first
call and reused afterwards.  ``close_redis_client`` is called from the app
lifespan on shutdown.
"""
from __future__ import annotations

from typing import Any

import redis.asyncio as redis

RedisClient = redis.Redis

_client: redis.Redis | None = None


def get_redis_client(redis_url: str, **kwargs: Any) -> redis.Redis:
    """Return (and lazily create) the module-level async Redis client."""
    global _client
    if _client is None:
        _client = redis.from_url(redis_url, decode_responses=True, **kwargs)
    return _client


async def close_redis_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
