"""Feed suggestion injector: splices a "for-you" block into an assembled feed.

A block is injected when the account has viewed more than
``min_content_threshold`` feeds since the last block and more than
``min_diff_time_ms`` have passed since then.  Suggestions enhance the feed and
never break it: any failure while ranking, resolving or rendering users
returns the feed as is.
"""

from __future__ import annotations

import logging
from datetime import datetime

from redis.exceptions import RedisError

from app.config import SuggestionPolicy
from app.ranking.client import RankingUnavailable
from app.seen.schemas import SeenState
from app.seen.service import SeenTracker
from app.suggestions.schemas import FeedResponse, SuggestionBlock
from app.suggestions.service import CandidateResolver
from app.users.render import render_user

logger = logging.getLogger(__name__)


def is_eligible(state: SeenState, now: datetime, policy: SuggestionPolicy) -> bool:
    return (
        state.seen_count > policy.min_content_threshold
        and state.ms_since_suggestion(now) > policy.min_diff_time_ms
    )


def insert_index(feed_length: int, min_content_threshold: int) -> int:
    """Position of the block: after the Nth item, or second-to-last in a short feed.

    Feeds of 0 or 1 items put the block first.
    """
    if min_content_threshold > feed_length:
        index = feed_length - 1
    else:
        index = min_content_threshold - 1
    return max(index, 0)


class FeedSuggestionInjector:
    def __init__(
        self, tracker: SeenTracker, resolver: CandidateResolver, policy: SuggestionPolicy
    ) -> None:
        self._tracker = tracker
        self._resolver = resolver
        self._policy = policy

    async def suggest(self, account_id: str, feed: FeedResponse) -> FeedResponse:
        """Return ``feed`` itself when nothing is injected, else a copy with the block."""
        try:
            state = await self._tracker.get_state(account_id)
        except RedisError as exc:
            logger.warning("Seen state unavailable for %s, skipping suggestions: %s", account_id, exc)
            return feed
        if state is None or not is_eligible(state, self._tracker.now(), self._policy):
            return feed

        try:
            claimed = await self._tracker.claim_injection(account_id, self._policy.min_diff_time_ms)
        except RedisError as exc:
            logger.warning("Could not claim suggestion slot for %s: %s", account_id, exc)
            return feed
        if not claimed:
            return feed

        try:
            block = await self._build_block(account_id)
        except RankingUnavailable as exc:
            logger.warning("Follow suggestions failed for %s: %s", account_id, exc)
            block = None
        except Exception:
            logger.exception("Follow suggestions failed for %s", account_id)
            block = None
        if block is None:
            await self._release(account_id)
            return feed

        payload = list(feed.payload)
        payload.insert(insert_index(len(payload), self._policy.min_content_threshold), block)
        try:
            await self._tracker.reset(account_id)
        except RedisError as exc:
            # The claim still holds the cool-down, so the block is not repeated
            logger.warning("Could not reset seen state for %s: %s", account_id, exc)
        logger.info("Injected %d follow suggestions for %s", len(block.payload), account_id)
        return feed.model_copy(update={"payload": payload})

    async def _build_block(self, account_id: str) -> SuggestionBlock | None:
        resolved = await self._resolver.rank(account_id)
        users = [r.user for r in resolved[: self._policy.suggest_amount]]
        if not users:
            return None
        return SuggestionBlock(payload=[render_user(u) for u in users])

    async def _release(self, account_id: str) -> None:
        try:
            await self._tracker.release_injection(account_id)
        except RedisError as exc:
            logger.warning("Could not release suggestion slot for %s: %s", account_id, exc)
