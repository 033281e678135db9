"""Suggestion paginator: cursor pages over a per-session ranking snapshot.

Without a cursor the predictor is called, the resolved ranking is stored as the
session's snapshot (replacing any previous one) and the first page is served.
With ``since_id``/``until_id`` the page is cut from the stored snapshot; a
missing snapshot or an unknown cursor yields an empty page, never an error.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from redis.asyncio import Redis
from redis.exceptions import RedisError

from app.config import SuggestionPolicy
from app.ranking.schemas import SuggestionCandidate
from app.suggestions import cache as suggest_cache
from app.suggestions.schemas import SuggestionPage, SuggestionQuery, UserField
from app.suggestions.service import CandidateResolver, render_users
from app.users.schemas import UserRecord
from shared.models.pagination import Meta
from shared.models.user import Authorizer

logger = logging.getLogger(__name__)


def select_window(
    snapshot: Sequence[SuggestionCandidate],
    *,
    since_id: str | None,
    until_id: str | None,
    max_results: int,
) -> list[SuggestionCandidate]:
    """Cut one page out of the snapshot around the cursor.

    until_id: the ``max_results`` entries after the cursor.
    since_id: the ``max_results`` entries ending at the cursor (cursor included).
    """
    cursor = until_id or since_id
    index = next((i for i, c in enumerate(snapshot) if c.user_id == cursor), -1)
    if index == -1:
        return []
    if until_id:
        start = index + 1
        return list(snapshot[start : start + max_results])
    return list(snapshot[max(index + 1 - max_results, 0) : index + 1])


class SuggestionPaginator:
    def __init__(
        self, redis: Redis, resolver: CandidateResolver, policy: SuggestionPolicy
    ) -> None:
        self._redis = redis
        self._resolver = resolver
        self._policy = policy

    async def suggest(self, authorizer: Authorizer, query: SuggestionQuery) -> SuggestionPage:
        """Raises RankingUnavailable when a fresh ranking is needed and the predictor fails."""
        max_results = min(
            query.max_results or self._policy.page_size_default, self._policy.page_size_max
        )
        if query.has_cursor:
            users, total = await self._from_snapshot(authorizer, query, max_results)
        else:
            users, total = await self._fresh(authorizer, max_results)

        payload = await render_users(
            self._resolver.directory,
            authorizer.user_id,
            users,
            with_relationships=UserField.RELATIONSHIPS in query.user_fields,
        )
        return SuggestionPage(payload=payload, meta=Meta.from_ids([u.id for u in users], total))

    async def _from_snapshot(
        self, authorizer: Authorizer, query: SuggestionQuery, max_results: int
    ) -> tuple[list[UserRecord], int | None]:
        try:
            snapshot = await suggest_cache.get_snapshot(
                authorizer.account_id, authorizer.access_token, self._redis
            )
        except RedisError as exc:
            logger.warning("Suggestion snapshot unavailable for %s: %s", authorizer.account_id, exc)
            return [], None
        if snapshot is None:
            return [], None

        window = select_window(
            snapshot, since_id=query.since_id, until_id=query.until_id, max_results=max_results
        )
        resolved = await self._resolver.resolve(window)
        return [r.user for r in resolved], len(snapshot)

    async def _fresh(self, authorizer: Authorizer, max_results: int) -> tuple[list[UserRecord], int]:
        resolved = await self._resolver.rank(authorizer.account_id)
        try:
            await suggest_cache.set_snapshot(
                authorizer.account_id,
                authorizer.access_token,
                [r.snapshot_entry() for r in resolved],
                self._redis,
                ttl_s=self._policy.snapshot_ttl_s,
            )
        except RedisError as exc:
            # First page still valid; cursors from it will come back empty
            logger.warning("Could not store suggestion snapshot for %s: %s", authorizer.account_id, exc)
        return [r.user for r in resolved[:max_results]], len(resolved)
