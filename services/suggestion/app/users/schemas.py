"""User directory records and the public user response shapes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from app.models.enums import UserType


@dataclass(frozen=True, slots=True)
class UserRecord:
    id: str
    display_name: str
    type: UserType | None
    handle: str | None = None
    overview: str | None = None
    avatar_url: str | None = None
    cover_url: str | None = None
    verified: bool = False
    followers_count: int = 0
    following_count: int = 0


class RelationshipFlags(BaseModel):
    followed: bool = Field(default=False, description="The viewer follows this user.")
    blocking: bool = Field(default=False, description="The viewer blocks this user.")
    blocked: bool = Field(default=False, description="This user blocks the viewer.")


class _PublicUser(BaseModel):
    id: str
    handle: str | None = Field(default=None, description="Public @handle.")
    display_name: str
    overview: str | None = None
    avatar_url: str | None = None
    cover_url: str | None = None
    verified: bool = False
    followers_count: int = 0
    relationship: RelationshipFlags | None = Field(
        default=None, description="Present only when relationships were requested."
    )


class PersonResponse(_PublicUser):
    type: Literal["people"] = "people"
    following_count: int = 0


class PageResponse(_PublicUser):
    type: Literal["page"] = "page"


UserResponse = Annotated[PersonResponse | PageResponse, Field(discriminator="type")]
