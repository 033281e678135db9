from fastapi import APIRouter, Depends

from app.dependencies import get_feed_injector, get_seen_tracker
from app.seen.schemas import SeenState
from app.seen.service import SeenTracker
from app.suggestions import controller
from app.suggestions.injector import FeedSuggestionInjector
from app.suggestions.schemas import FeedResponse, InjectFeedRequest

router = APIRouter(prefix="/suggestions/internal", tags=["Suggestions"])


@router.post(
    "/feed",
    response_model=FeedResponse,
    summary="Internal: inject a follow-suggestion block into a feed (service-to-service).",
)
async def inject_feed_suggestions(
    body: InjectFeedRequest,
    injector: FeedSuggestionInjector = Depends(get_feed_injector),
) -> FeedResponse:
    return await controller.inject_suggestions(body, injector)


@router.get(
    "/seen/{account_id}",
    response_model=SeenState,
    summary="Internal: current feed-view cadence of an account.",
)
async def get_seen_state(
    account_id: str,
    tracker: SeenTracker = Depends(get_seen_tracker),
) -> SeenState:
    return await controller.get_seen_state(account_id, tracker)
