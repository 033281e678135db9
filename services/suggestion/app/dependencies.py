"""FastAPI dependency providers: settings, clients and the suggestion engines."""

from fastapi import Depends, Request
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, SuggestionPolicy
from app.database import get_db
from app.ranking.client import RankingClient, RankingPredictor
from app.seen.service import SeenTracker
from app.suggestions.injector import FeedSuggestionInjector
from app.suggestions.paginator import SuggestionPaginator
from app.suggestions.service import CandidateResolver
from app.users.directory import SqlUserDirectory, UserDirectory


def get_settings() -> Settings:
    return Settings()


def get_policy(settings: Settings = Depends(get_settings)) -> SuggestionPolicy:
    return settings.suggestion_policy()


async def get_redis(request: Request) -> Redis:
    return request.app.state.redis


def get_ranking_predictor(settings: Settings = Depends(get_settings)) -> RankingPredictor:
    return RankingClient(
        settings.ranking_service_base_url,
        timeout_s=settings.ranking_timeout_s,
        max_retries=settings.ranking_max_retries,
    )


async def get_user_directory(db: AsyncSession = Depends(get_db)) -> UserDirectory:
    return SqlUserDirectory(db)


def get_seen_tracker(redis: Redis = Depends(get_redis)) -> SeenTracker:
    return SeenTracker(redis)


def get_candidate_resolver(
    predictor: RankingPredictor = Depends(get_ranking_predictor),
    directory: UserDirectory = Depends(get_user_directory),
) -> CandidateResolver:
    return CandidateResolver(predictor, directory)


def get_feed_injector(
    tracker: SeenTracker = Depends(get_seen_tracker),
    resolver: CandidateResolver = Depends(get_candidate_resolver),
    policy: SuggestionPolicy = Depends(get_policy),
) -> FeedSuggestionInjector:
    return FeedSuggestionInjector(tracker, resolver, policy)


def get_paginator(
    redis: Redis = Depends(get_redis),
    resolver: CandidateResolver = Depends(get_candidate_resolver),
    policy: SuggestionPolicy = Depends(get_policy),
) -> SuggestionPaginator:
    return SuggestionPaginator(redis, resolver, policy)
