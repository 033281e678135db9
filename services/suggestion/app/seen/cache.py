"""Redis cache helpers for the seen tracker.

Key schema
----------
{account_id}-seen         hash  no TTL           seen_count, last_seen, last_suggestion (epoch ms)
{account_id}-seen:claim   "1"   TTL min diff ms  suggestion-injection slot for the cool-down window
"""

from redis.asyncio import Redis

from app.seen.schemas import SeenState

_SEEN_COUNT = "seen_count"
_LAST_SEEN = "last_seen"
_LAST_SUGGESTION = "last_suggestion"


def seen_key(account_id: str) -> str:
    return f"{account_id}-seen"


def _claim_key(account_id: str) -> str:
    return f"{seen_key(account_id)}:claim"


async def get_seen_state(account_id: str, redis: Redis) -> SeenState | None:
    """Return the cached state or None if the account never viewed a feed."""
    raw = await redis.hgetall(seen_key(account_id))
    return SeenState.from_mapping(raw) if raw else None


async def increment_seen(account_id: str, now_ms: int, redis: Redis) -> None:
    """Atomically bump seen_count and stamp last_seen (MULTI/EXEC, no lost updates).

    HINCRBY creates the hash on first use, so the lazy-create path needs no read.
    """
    key = seen_key(account_id)
    pipeline = redis.pipeline(transaction=True)
    pipeline.hincrby(key, _SEEN_COUNT, 1)
    pipeline.hset(key, _LAST_SEEN, now_ms)
    await pipeline.execute()


async def reset_seen(account_id: str, now_ms: int, redis: Redis) -> None:
    await redis.hset(
        seen_key(account_id),
        mapping={_SEEN_COUNT: 0, _LAST_SEEN: now_ms, _LAST_SUGGESTION: now_ms},
    )


async def claim_suggestion_slot(account_id: str, ttl_ms: int, redis: Redis) -> bool:
    """Return True for the single caller that wins the slot within ttl_ms.

    SET NX makes check-and-set atomic, so concurrent eligible requests for the
    same account inject at most one block.
    """
    return bool(await redis.set(_claim_key(account_id), "1", nx=True, px=max(ttl_ms, 1)))


async def release_suggestion_slot(account_id: str, redis: Redis) -> None:
    await redis.delete(_claim_key(account_id))
