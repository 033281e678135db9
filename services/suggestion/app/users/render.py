from app.models.enums import UserType
from app.users.schemas import (
    PageResponse,
    PersonResponse,
    RelationshipFlags,
    UserRecord,
)


def to_person_response(
    user: UserRecord, relationship: RelationshipFlags | None = None
) -> PersonResponse:
    return PersonResponse(
        id=user.id,
        handle=user.handle,
        display_name=user.display_name,
        overview=user.overview,
        avatar_url=user.avatar_url,
        cover_url=user.cover_url,
        verified=user.verified,
        followers_count=user.followers_count,
        following_count=user.following_count,
        relationship=relationship,
    )


def to_page_response(
    user: UserRecord, relationship: RelationshipFlags | None = None
) -> PageResponse:
    return PageResponse(
        id=user.id,
        handle=user.handle,
        display_name=user.display_name,
        overview=user.overview,
        avatar_url=user.avatar_url,
        cover_url=user.cover_url,
        verified=user.verified,
        followers_count=user.followers_count,
        relationship=relationship,
    )


def render_user(
    user: UserRecord, relationship: RelationshipFlags | None = None
) -> PersonResponse | PageResponse:
    if user.type is UserType.PAGE:
        return to_page_response(user, relationship)
    return to_person_response(user, relationship)
