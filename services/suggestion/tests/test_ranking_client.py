import json

import httpx
import pytest

from app.ranking.client import RankingClient, RankingUnavailable

BASE_URL = "http://ds.test"


def _client(handler, max_retries: int = 1) -> RankingClient:
    return RankingClient(
        BASE_URL, timeout_s=1.0, max_retries=max_retries, transport=httpx.MockTransport(handler)
    )


@pytest.mark.asyncio
async def test_posts_account_and_parses_ranking() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json={"result": [{"userId": "u2", "engagements": 0.9}, {"userId": "u1", "engagements": 0.4}]},
        )

    candidates = await _client(handler).predict_follow_suggestions("acc-1")

    assert [(c.user_id, c.engagements) for c in candidates] == [("u2", 0.9), ("u1", 0.4)]
    [request] = requests
    assert request.method == "POST"
    assert str(request.url) == f"{BASE_URL}/ds_service/suggest_follow_score"
    assert json.loads(request.content) == {"accountId": "acc-1"}


@pytest.mark.asyncio
async def test_missing_engagements_default_to_zero() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"result": [{"userId": "u1"}]})

    [candidate] = await _client(handler).predict_follow_suggestions("acc-1")
    assert candidate.engagements == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"result": None}, {"result": []}, []])
async def test_no_result_means_no_candidates(body) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    assert await _client(handler).predict_follow_suggestions("acc-1") == []


@pytest.mark.asyncio
async def test_server_error_is_retried() -> None:
    answers = iter([httpx.Response(502), httpx.Response(200, json={"result": [{"userId": "u1"}]})])

    def handler(request: httpx.Request) -> httpx.Response:
        return next(answers)

    candidates = await _client(handler).predict_follow_suggestions("acc-1")
    assert [c.user_id for c in candidates] == ["u1"]


@pytest.mark.asyncio
async def test_server_error_after_retries_raises() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(503)

    with pytest.raises(RankingUnavailable):
        await _client(handler, max_retries=2).predict_follow_suggestions("acc-1")
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_client_error_is_not_retried() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(400, json={"detail": "bad account"})

    with pytest.raises(RankingUnavailable):
        await _client(handler, max_retries=3).predict_follow_suggestions("acc-1")
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_timeout_raises_ranking_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    with pytest.raises(RankingUnavailable) as exc_info:
        await _client(handler, max_retries=0).predict_follow_suggestions("acc-1")
    assert isinstance(exc_info.value.__cause__, httpx.ReadTimeout)


@pytest.mark.asyncio
async def test_non_json_body_raises_ranking_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>oops</html>")

    with pytest.raises(RankingUnavailable):
        await _client(handler, max_retries=0).predict_follow_suggestions("acc-1")


@pytest.mark.asyncio
async def test_malformed_ranking_raises_ranking_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"result": [{"engagements": "lots"}]})

    with pytest.raises(RankingUnavailable):
        await _client(handler).predict_follow_suggestions("acc-1")
