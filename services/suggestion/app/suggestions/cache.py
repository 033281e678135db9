"""Redis cache helpers for suggestion ranking snapshots.

Key schema
----------
suggest:{account_id}:{sha256(access_token)}   JSON list   TTL optional   ranking snapshot

A snapshot is the resolved ranking from the last fresh predictor call for one
session.  It is written whole and only ever replaced, never patched; cursors
are positions in it.
"""

import hashlib
import json
import logging

from pydantic import TypeAdapter, ValidationError
from redis.asyncio import Redis

from app.ranking.schemas import SuggestionCandidate

logger = logging.getLogger(__name__)

_snapshot = TypeAdapter(list[SuggestionCandidate])


def snapshot_key(account_id: str, access_token: str) -> str:
    token_hash = hashlib.sha256(access_token.encode()).hexdigest()
    return f"suggest:{account_id}:{token_hash}"


async def get_snapshot(
    account_id: str, access_token: str, redis: Redis
) -> list[SuggestionCandidate] | None:
    """Return the cached ranking, or None on a miss or an unreadable entry."""
    val = await redis.get(snapshot_key(account_id, access_token))
    if val is None:
        return None
    try:
        return _snapshot.validate_python(json.loads(val))
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.warning("Discarding unreadable suggestion snapshot for %s: %s", account_id, exc)
        return None


async def set_snapshot(
    account_id: str,
    access_token: str,
    candidates: list[SuggestionCandidate],
    redis: Redis,
    ttl_s: int = 0,
) -> None:
    value = json.dumps([c.model_dump(mode="json", by_alias=True) for c in candidates])
    key = snapshot_key(account_id, access_token)
    if ttl_s > 0:
        await redis.setex(key, ttl_s, value)
    else:
        await redis.set(key, value)
