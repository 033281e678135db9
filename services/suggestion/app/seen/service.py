"""Seen tracker: per-account feed-view cadence kept in Redis.

Recording a view is fire-and-forget: a cache outage is logged and swallowed so
feed delivery never fails because of suggestion bookkeeping.  Reads and resets
raise ``redis.RedisError``; the suggestion engines decide how to degrade.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from redis.asyncio import Redis
from redis.exceptions import RedisError

from app.seen import cache as seen_cache
from app.seen.schemas import SeenState, to_epoch_ms

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SeenTracker:
    def __init__(self, redis: Redis, clock: Callable[[], datetime] = utcnow) -> None:
        self._redis = redis
        self._clock = clock

    def now(self) -> datetime:
        return self._clock()

    async def seen(self, account_id: str) -> None:
        try:
            await seen_cache.increment_seen(account_id, to_epoch_ms(self._clock()), self._redis)
        except RedisError as exc:
            logger.warning("Could not record feed view for account %s: %s", account_id, exc)

    async def get_state(self, account_id: str) -> SeenState | None:
        return await seen_cache.get_seen_state(account_id, self._redis)

    async def claim_injection(self, account_id: str, cooldown_ms: int) -> bool:
        return await seen_cache.claim_suggestion_slot(account_id, cooldown_ms, self._redis)

    async def release_injection(self, account_id: str) -> None:
        await seen_cache.release_suggestion_slot(account_id, self._redis)

    async def reset(self, account_id: str) -> SeenState:
        """Mark a suggestion as injected now: count back to 0, both timestamps stamped."""
        now = self._clock()
        await seen_cache.reset_seen(account_id, to_epoch_ms(now), self._redis)
        return SeenState(seen_count=0, last_seen=now, last_suggestion=now)
