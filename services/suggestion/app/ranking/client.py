"""
Follow-suggestion predictor client: async httpx calls to the data-science service.

``POST {base}/ds_service/suggest_follow_score`` with ``{"accountId": ...}``
answers ``{"result": [{"userId": ..., "engagements": ...}, ...]}`` in rank
order.  Transport errors, timeouts and 5xx answers are retried up to
``max_retries`` times (the call is read-only); anything still failing, or a
malformed payload, raises ``RankingUnavailable``.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Protocol

import httpx
from pydantic import TypeAdapter, ValidationError

from app.ranking.schemas import SuggestionCandidate

logger = logging.getLogger(__name__)

_SUGGEST_FOLLOW_PATH = "/ds_service/suggest_follow_score"
_candidates = TypeAdapter(list[SuggestionCandidate])


class RankingUnavailable(Exception):
    """The predictor could not produce a ranking (network, timeout, bad payload)."""


class RankingPredictor(Protocol):
    async def predict_follow_suggestions(self, account_id: str) -> list[SuggestionCandidate]: ...


class RankingClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout_s: float = 5.0,
        max_retries: int = 0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._max_retries = max(max_retries, 0)
        self._transport = transport

    async def predict_follow_suggestions(self, account_id: str) -> list[SuggestionCandidate]:
        data = await self._post(
            _SUGGEST_FOLLOW_PATH, {"accountId": account_id}, "predict_follow_suggestions"
        )
        result = data.get("result") if isinstance(data, dict) else None
        if result is None:
            return []
        try:
            candidates = _candidates.validate_python(result)
        except ValidationError as exc:
            logger.error("predict_follow_suggestions: malformed result for %s: %s", account_id, exc)
            raise RankingUnavailable("Predictor returned a malformed ranking") from exc
        logger.info("predict_follow_suggestions: %d candidates for %s", len(candidates), account_id)
        return candidates

    async def _post(self, path: str, body: dict[str, Any], context: str) -> Any:
        url = f"{self._base_url}{path}"
        attempts = self._max_retries + 1
        last_error: Exception | None = None
        logger.info("%s:init %s %s", context, url, body)

        for attempt in range(1, attempts + 1):
            started = time.perf_counter()
            try:
                async with httpx.AsyncClient(
                    timeout=self._timeout_s, transport=self._transport
                ) as client:
                    r = await client.post(url, json=body)
                r.raise_for_status()
                data = r.json()
            except httpx.HTTPStatusError as exc:
                last_error = exc
                logger.warning(
                    "%s:error attempt %d/%d status %s: %s",
                    context, attempt, attempts, exc.response.status_code, exc.response.text[:300],
                )
                if exc.response.status_code < 500:
                    break
            except (httpx.HTTPError, ValueError) as exc:
                last_error = exc
                logger.warning(
                    "%s:error attempt %d/%d after %.0f ms: %r",
                    context, attempt, attempts, (time.perf_counter() - started) * 1000, exc,
                )
            else:
                logger.info(
                    "%s:success in %.0f ms", context, (time.perf_counter() - started) * 1000
                )
                return data

        raise RankingUnavailable(f"{context} failed after {attempts} attempt(s)") from last_error
