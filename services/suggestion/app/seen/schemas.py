"""Seen-tracker schemas."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


def to_epoch_ms(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


def from_epoch_ms(value: str | int | None) -> datetime | None:
    if value is None or value == "":
        return None
    return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)


class SeenState(BaseModel):
    """Per-account feed-view cadence.

    ``seen_count`` counts feed views since the last injected suggestion block;
    it drops back to 0 only when a block is injected.
    """

    model_config = ConfigDict(frozen=True)

    seen_count: int = Field(ge=0, description="Feed views since the last suggestion.")
    last_seen: datetime | None = Field(default=None, description="Last recorded feed view.")
    last_suggestion: datetime | None = Field(
        default=None, description="Last time a suggestion block was injected."
    )

    @classmethod
    def from_mapping(cls, raw: Mapping[str, str]) -> "SeenState":
        return cls(
            seen_count=int(raw.get("seen_count") or 0),
            last_seen=from_epoch_ms(raw.get("last_seen")),
            last_suggestion=from_epoch_ms(raw.get("last_suggestion")),
        )

    def ms_since_suggestion(self, now: datetime) -> int:
        """Milliseconds since the last suggestion; a never-suggested account counts from epoch 0."""
        last = to_epoch_ms(self.last_suggestion) if self.last_suggestion else 0
        return to_epoch_ms(now) - last
