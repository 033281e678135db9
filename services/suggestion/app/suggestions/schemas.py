"""Suggestion domain Pydantic V2 schemas."""

from __future__ import annotations

import enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from app.users.schemas import UserResponse
from shared.models.pagination import Meta


class UserField(str, enum.Enum):
    RELATIONSHIPS = "relationships"


# ---------------------------------------------------------------------------
# Feed injection (v1)
# ---------------------------------------------------------------------------


class FeedItem(BaseModel):
    """An item of an already-assembled feed; fields beyond id/type pass through untouched."""

    model_config = ConfigDict(extra="allow")

    id: str
    type: str


class FeedLabel(BaseModel):
    id: str | None = None
    key: str
    name: str
    slug: str


class SuggestionBlock(BaseModel):
    """Synthetic feed entry listing accounts to follow."""

    id: Literal["for-you"] = "for-you"
    type: Literal["suggestion-follow"] = "suggestion-follow"
    feature: FeedLabel = Field(
        default_factory=lambda: FeedLabel(key="feature.feed", name="Feed", slug="feed")
    )
    circle: FeedLabel = Field(
        default_factory=lambda: FeedLabel(
            id="for-you", key="circle.forYou", name="For You", slug="forYou"
        )
    )
    payload: list[UserResponse]


class FeedResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    payload: list[SuggestionBlock | FeedItem] = Field(default_factory=list)
    meta: dict[str, Any] | None = None
    includes: dict[str, Any] | None = None


class InjectFeedRequest(BaseModel):
    """Internal: a feed built for ``account_id`` that may receive a suggestion block."""

    account_id: str
    feed: FeedResponse


# ---------------------------------------------------------------------------
# Suggestion listing (v2 cursor pages + plain listing)
# ---------------------------------------------------------------------------


class SuggestionQuery(BaseModel):
    """Cursor query over the caller's ranking snapshot.

    ``until_id`` pages forward (items after the cursor) and wins when both
    cursors are given; ``since_id`` pages backward.
    """

    max_results: int | None = Field(default=None, ge=1)
    since_id: str | None = None
    until_id: str | None = None
    user_fields: list[UserField] = Field(default_factory=list)

    @property
    def has_cursor(self) -> bool:
        return bool(self.since_id or self.until_id)


class SuggestionPage(BaseModel):
    payload: list[UserResponse]
    meta: Meta


class SuggestToFollowResponse(BaseModel):
    payload: list[UserResponse]
    meta: Meta
