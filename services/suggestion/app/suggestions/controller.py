"""Suggestion controller: orchestration layer between router and service."""

from app.exceptions import NotFoundError, ServiceUnavailableError
from app.ranking.client import RankingUnavailable
from app.seen.schemas import SeenState
from app.seen.service import SeenTracker
from app.suggestions import service
from app.suggestions.schemas import (
    FeedResponse,
    InjectFeedRequest,
    SuggestionPage,
    SuggestionQuery,
    SuggestToFollowResponse,
)
from app.suggestions.strategy import SuggestionStrategy
from shared.models.user import Authorizer


async def record_seen(account_id: str, tracker: SeenTracker) -> None:
    await tracker.seen(account_id)


async def get_seen_state(account_id: str, tracker: SeenTracker) -> SeenState:
    state = await tracker.get_state(account_id)
    if state is None:
        raise NotFoundError("Seen state")
    return state


async def inject_suggestions(
    body: InjectFeedRequest, injector: SuggestionStrategy[str, FeedResponse, FeedResponse]
) -> FeedResponse:
    return await injector.suggest(body.account_id, body.feed)


async def get_suggestion_page(
    authorizer: Authorizer,
    query: SuggestionQuery,
    paginator: SuggestionStrategy[Authorizer, SuggestionQuery, SuggestionPage],
) -> SuggestionPage:
    try:
        return await paginator.suggest(authorizer, query)
    except RankingUnavailable:
        raise ServiceUnavailableError()


async def get_suggest_to_follow(
    authorizer: Authorizer, resolver: service.CandidateResolver
) -> SuggestToFollowResponse:
    try:
        return await service.suggest_to_follow(authorizer.account_id, resolver)
    except RankingUnavailable:
        raise ServiceUnavailableError()
