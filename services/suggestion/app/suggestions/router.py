from fastapi import APIRouter, Depends, Query, status

from app.dependencies import (
    get_candidate_resolver,
    get_paginator,
    get_seen_tracker,
)
from app.seen.service import SeenTracker
from app.suggestions import controller
from app.suggestions.paginator import SuggestionPaginator
from app.suggestions.schemas import (
    SuggestionPage,
    SuggestionQuery,
    SuggestToFollowResponse,
    UserField,
)
from app.suggestions.service import CandidateResolver
from shared.auth.dependencies import get_authorizer
from shared.models.user import Authorizer

router = APIRouter(tags=["Suggestions"])


@router.post(
    "/suggestions/seen",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Record a feed view",
    description=(
        "Counts one feed view for the caller's account. Feed views drive when a "
        "follow-suggestion block is injected into the feed. Never fails because of "
        "cache problems. Requires authentication."
    ),
)
async def record_seen(
    authorizer: Authorizer = Depends(get_authorizer),
    tracker: SeenTracker = Depends(get_seen_tracker),
) -> None:
    await controller.record_seen(authorizer.account_id, tracker)


@router.get(
    "/users/me/suggestions",
    response_model=SuggestionPage,
    summary="Suggested accounts to follow (cursor-paginated)",
    description=(
        "Without a cursor a fresh ranking is computed and stored for this session, "
        "and its first page is returned. Pass `until_id` (the page's `oldest_id`) for "
        "the next page or `since_id` to page back. Cursors belong to the latest "
        "ranking of the session; stale cursors return an empty page. "
        "Returns 503 when a fresh ranking cannot be computed. Requires authentication."
    ),
)
async def get_suggestions(
    max_results: int | None = Query(
        None, ge=1, description="Page size; larger values are capped at the configured maximum."
    ),
    since_id: str | None = Query(None, description="Page back, ending at this user."),
    until_id: str | None = Query(None, description="Page forward, after this user."),
    user_fields: list[UserField] = Query(
        default=[], description="Pass `relationships` to include follow/block flags."
    ),
    authorizer: Authorizer = Depends(get_authorizer),
    paginator: SuggestionPaginator = Depends(get_paginator),
) -> SuggestionPage:
    query = SuggestionQuery(
        max_results=max_results, since_id=since_id, until_id=until_id, user_fields=user_fields
    )
    return await controller.get_suggestion_page(authorizer, query, paginator)


@router.get(
    "/suggestions/follow",
    response_model=SuggestToFollowResponse,
    summary="All suggested accounts to follow",
    description=(
        "Every resolvable account from a fresh ranking, most relevant first. "
        "Returns 503 when the ranking cannot be computed. Requires authentication."
    ),
)
async def get_suggest_to_follow(
    authorizer: Authorizer = Depends(get_authorizer),
    resolver: CandidateResolver = Depends(get_candidate_resolver),
) -> SuggestToFollowResponse:
    return await controller.get_suggest_to_follow(authorizer, resolver)
