from collections.abc import AsyncGenerator, Sequence
from datetime import datetime, timedelta, timezone

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from redis.exceptions import ConnectionError as RedisConnectionError

from app.config import SuggestionPolicy
from app.dependencies import get_ranking_predictor, get_redis, get_user_directory
from app.main import create_app
from app.models.enums import UserType
from app.ranking.client import RankingUnavailable
from app.ranking.schemas import SuggestionCandidate
from app.seen.service import SeenTracker
from app.suggestions.injector import FeedSuggestionInjector
from app.suggestions.paginator import SuggestionPaginator
from app.suggestions.service import CandidateResolver
from app.users.schemas import RelationshipFlags, UserRecord
from shared.auth.config import AuthSettings
from shared.models.user import Authorizer


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


class FakePipeline:
    def __init__(self, redis: "FakeRedis") -> None:
        self._redis = redis
        self._ops: list[tuple[str, tuple, dict]] = []

    def _queue(self, name: str, *args, **kwargs) -> "FakePipeline":
        self._ops.append((name, args, kwargs))
        return self

    def hincrby(self, *args, **kwargs) -> "FakePipeline":
        return self._queue("hincrby", *args, **kwargs)

    def hset(self, *args, **kwargs) -> "FakePipeline":
        return self._queue("hset", *args, **kwargs)

    def set(self, *args, **kwargs) -> "FakePipeline":
        return self._queue("set", *args, **kwargs)

    async def execute(self) -> list:
        self._redis._check()
        return [await getattr(self._redis, name)(*args, **kwargs) for name, args, kwargs in self._ops]


class FakeRedis:
    """In-memory stand-in for redis.asyncio.Redis (decode_responses=True)."""

    def __init__(self, clock: FakeClock) -> None:
        self._clock = clock
        self.store: dict[str, object] = {}
        self.expires_at: dict[str, datetime] = {}
        self.writes: list[tuple[str, str]] = []
        self.down = False

    def _check(self) -> None:
        if self.down:
            raise RedisConnectionError("redis is down")

    def _live(self, key: str) -> object | None:
        deadline = self.expires_at.get(key)
        if deadline is not None and self._clock() >= deadline:
            self.store.pop(key, None)
            self.expires_at.pop(key, None)
        return self.store.get(key)

    def _write(self, op: str, key: str) -> None:
        self.writes.append((op, key))

    async def get(self, key: str) -> str | None:
        self._check()
        return self._live(key)

    async def set(self, key: str, value, nx: bool = False, px: int | None = None, ex: int | None = None):
        self._check()
        if nx and self._live(key) is not None:
            return None
        self.store[key] = str(value)
        self.expires_at.pop(key, None)
        if px:
            self.expires_at[key] = self._clock() + timedelta(milliseconds=px)
        elif ex:
            self.expires_at[key] = self._clock() + timedelta(seconds=ex)
        self._write("set", key)
        return True

    async def setex(self, key: str, ttl: int, value) -> bool:
        return await self.set(key, value, ex=ttl)

    async def delete(self, *keys: str) -> int:
        self._check()
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
            self.expires_at.pop(key, None)
            self._write("delete", key)
        return removed

    async def hgetall(self, key: str) -> dict[str, str]:
        self._check()
        return dict(self._live(key) or {})

    async def hset(self, key: str, field: str | None = None, value=None, mapping: dict | None = None) -> int:
        self._check()
        bucket = self.store.setdefault(key, {})
        items = dict(mapping or {})
        if field is not None:
            items[field] = value
        for f, v in items.items():
            bucket[f] = str(v)
        self._write("hset", key)
        return len(items)

    async def hincrby(self, key: str, field: str, amount: int = 1) -> int:
        self._check()
        bucket = self.store.setdefault(key, {})
        bucket[field] = str(int(bucket.get(field, 0)) + amount)
        self._write("hincrby", key)
        return int(bucket[field])

    def pipeline(self, transaction: bool = True) -> FakePipeline:
        return FakePipeline(self)


class FakeDirectory:
    def __init__(self) -> None:
        self.users: dict[str, UserRecord] = {}
        self.relationships: dict[tuple[str, str], RelationshipFlags] = {}
        self.relationship_calls = 0
        self.error: Exception | None = None

    def add(self, *users: UserRecord) -> None:
        for user in users:
            self.users[user.id] = user

    def remove(self, user_id: str) -> None:
        self.users.pop(user_id, None)

    async def resolve_users(self, refs: Sequence[str]) -> dict[str, UserRecord]:
        if self.error is not None:
            raise self.error
        by_handle = {u.handle: u for u in self.users.values() if u.handle}
        resolved = {}
        for ref in refs:
            user = self.users.get(ref) or by_handle.get(ref)
            if user is not None:
                resolved[ref] = user
        return resolved

    async def get_relationships(self, viewer_id: str, user_ids: Sequence[str]) -> dict[str, RelationshipFlags]:
        self.relationship_calls += 1
        return {
            uid: self.relationships.get((viewer_id, uid), RelationshipFlags()) for uid in user_ids
        }


class FakePredictor:
    def __init__(self) -> None:
        self.candidates: list[SuggestionCandidate] = []
        self.error: Exception | None = None
        self.calls: list[str] = []

    def rank(self, *user_ids: str) -> None:
        self.candidates = [
            SuggestionCandidate(user_id=uid, engagements=float(len(user_ids) - i))
            for i, uid in enumerate(user_ids)
        ]

    async def predict_follow_suggestions(self, account_id: str) -> list[SuggestionCandidate]:
        self.calls.append(account_id)
        if self.error is not None:
            raise self.error
        return list(self.candidates)


def person(user_id: str, **kwargs) -> UserRecord:
    return UserRecord(id=user_id, display_name=f"Person {user_id}", type=UserType.PEOPLE, **kwargs)


USER_IDS = [f"u{i}" for i in range(1, 11)]


@pytest.fixture
def make_person():
    return person


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 1, 1, tzinfo=timezone.utc))


@pytest.fixture
def redis(clock: FakeClock) -> FakeRedis:
    return FakeRedis(clock)


@pytest.fixture
def directory() -> FakeDirectory:
    d = FakeDirectory()
    d.add(*(person(uid) for uid in USER_IDS))
    return d


@pytest.fixture
def predictor() -> FakePredictor:
    p = FakePredictor()
    p.rank(*USER_IDS)
    return p


@pytest.fixture
def policy() -> SuggestionPolicy:
    return SuggestionPolicy(min_content_threshold=6, min_diff_time_ms=15_000, suggest_amount=2)


@pytest.fixture
def tracker(redis: FakeRedis, clock: FakeClock) -> SeenTracker:
    return SeenTracker(redis, clock=clock)


@pytest.fixture
def resolver(predictor: FakePredictor, directory: FakeDirectory) -> CandidateResolver:
    return CandidateResolver(predictor, directory)


@pytest.fixture
def injector(tracker: SeenTracker, resolver: CandidateResolver, policy: SuggestionPolicy) -> FeedSuggestionInjector:
    return FeedSuggestionInjector(tracker, resolver, policy)


@pytest.fixture
def paginator(redis: FakeRedis, resolver: CandidateResolver, policy: SuggestionPolicy) -> SuggestionPaginator:
    return SuggestionPaginator(redis, resolver, policy)


@pytest.fixture
def authorizer() -> Authorizer:
    return Authorizer(account_id="acc-1", user_id="viewer", access_token="token-1")


@pytest.fixture
def ranking_unavailable() -> RankingUnavailable:
    return RankingUnavailable("predictor down")


@pytest.fixture
def auth_header() -> dict[str, str]:
    settings = AuthSettings()
    token = jwt.encode(
        {"sub": "acc-1", "uid": "viewer", "iss": settings.issuer, "aud": settings.audience},
        settings.secret,
        algorithm=settings.algorithm,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def async_client(
    redis: FakeRedis, predictor: FakePredictor, directory: FakeDirectory
) -> AsyncGenerator[AsyncClient, None]:
    app = create_app()
    app.dependency_overrides[get_redis] = lambda: redis
    app.dependency_overrides[get_ranking_predictor] = lambda: predictor
    app.dependency_overrides[get_user_directory] = lambda: directory
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
