"""Suggestion service: candidate ranking and resolution shared by both strategies.

No FastAPI imports.  The predictor and the user directory are injected, so the
same code path feeds the feed injector, the cursor paginator and the plain
suggest-to-follow listing.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from app.ranking.client import RankingPredictor
from app.ranking.schemas import SuggestionCandidate
from app.suggestions.schemas import SuggestToFollowResponse
from app.users.directory import UserDirectory
from app.users.render import render_user
from app.users.schemas import PageResponse, PersonResponse, UserRecord
from shared.models.pagination import Meta

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResolvedCandidate:
    candidate: SuggestionCandidate
    user: UserRecord

    def snapshot_entry(self) -> SuggestionCandidate:
        """Snapshot entries are keyed by user id so page cursors can find them."""
        return SuggestionCandidate(user_id=self.user.id, engagements=self.candidate.engagements)


class CandidateResolver:
    def __init__(self, predictor: RankingPredictor, directory: UserDirectory) -> None:
        self._predictor = predictor
        self._directory = directory

    @property
    def directory(self) -> UserDirectory:
        return self._directory

    async def rank(self, account_id: str) -> list[ResolvedCandidate]:
        """Fresh ranking for the account, resolved to live users.

        Raises RankingUnavailable when the predictor fails.
        """
        candidates = await self._predictor.predict_follow_suggestions(account_id)
        return await self.resolve(candidates)

    async def resolve(self, candidates: Sequence[SuggestionCandidate]) -> list[ResolvedCandidate]:
        """Keep rank order; drop unknown, deleted, untyped and repeated users."""
        if not candidates:
            return []
        found = await self._directory.resolve_users([c.user_id for c in candidates])
        resolved: list[ResolvedCandidate] = []
        kept: set[str] = set()
        for candidate in candidates:
            user = found.get(candidate.user_id)
            if user is None or user.type is None or user.id in kept:
                continue
            kept.add(user.id)
            resolved.append(ResolvedCandidate(candidate=candidate, user=user))
        if len(resolved) < len(candidates):
            logger.debug(
                "Dropped %d of %d suggestion candidates", len(candidates) - len(resolved), len(candidates)
            )
        return resolved


async def render_users(
    directory: UserDirectory,
    viewer_user_id: str,
    users: Sequence[UserRecord],
    with_relationships: bool = False,
) -> list[PersonResponse | PageResponse]:
    if not with_relationships or not users:
        return [render_user(u) for u in users]
    relationships = await directory.get_relationships(viewer_user_id, [u.id for u in users])
    return [render_user(u, relationships.get(u.id)) for u in users]


async def suggest_to_follow(account_id: str, resolver: CandidateResolver) -> SuggestToFollowResponse:
    """Every resolvable candidate for the account, in rank order."""
    users = [r.user for r in await resolver.rank(account_id)]
    return SuggestToFollowResponse(
        payload=[render_user(u) for u in users],
        meta=Meta.from_ids([u.id for u in users], len(users)),
    )
