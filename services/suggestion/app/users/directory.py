"""User directory: resolves ranked user references to live profiles.

References may be user ids or public handles.  Deleted users and users that
do not exist are simply absent from the result.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.social import Block, Follow
from app.models.user import User
from app.users.schemas import RelationshipFlags, UserRecord


class UserDirectory(Protocol):
    async def resolve_users(self, refs: Sequence[str]) -> dict[str, UserRecord]:
        """Map each resolvable reference (id or handle) to its user."""
        ...

    async def get_relationships(
        self, viewer_id: str, user_ids: Sequence[str]
    ) -> dict[str, RelationshipFlags]: ...


def _to_record(user: User) -> UserRecord:
    return UserRecord(
        id=user.id,
        handle=user.handle,
        type=user.type,
        display_name=user.display_name,
        overview=user.overview,
        avatar_url=user.avatar_url,
        cover_url=user.cover_url,
        verified=user.verified,
        followers_count=user.followers_count,
        following_count=user.following_count,
    )


class SqlUserDirectory:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def resolve_users(self, refs: Sequence[str]) -> dict[str, UserRecord]:
        wanted = set(refs)
        if not wanted:
            return {}
        result = await self._session.execute(
            sa.select(User).where(
                User.deleted_at.is_(None),
                sa.or_(User.id.in_(wanted), User.handle.in_(wanted)),
            )
        )
        resolved: dict[str, UserRecord] = {}
        for user in result.scalars().all():
            record = _to_record(user)
            if user.id in wanted:
                resolved[user.id] = record
            if user.handle and user.handle in wanted:
                resolved[user.handle] = record
        return resolved

    async def get_relationships(
        self, viewer_id: str, user_ids: Sequence[str]
    ) -> dict[str, RelationshipFlags]:
        ids = list(dict.fromkeys(user_ids))
        if not ids:
            return {}

        followed = set(
            (
                await self._session.execute(
                    sa.select(Follow.following_id).where(
                        Follow.follower_id == viewer_id, Follow.following_id.in_(ids)
                    )
                )
            ).scalars()
        )
        blocking = set(
            (
                await self._session.execute(
                    sa.select(Block.blocked_id).where(
                        Block.blocker_id == viewer_id, Block.blocked_id.in_(ids)
                    )
                )
            ).scalars()
        )
        blocked = set(
            (
                await self._session.execute(
                    sa.select(Block.blocker_id).where(
                        Block.blocked_id == viewer_id, Block.blocker_id.in_(ids)
                    )
                )
            ).scalars()
        )
        return {
            uid: RelationshipFlags(
                followed=uid in followed, blocking=uid in blocking, blocked=uid in blocked
            )
            for uid in ids
        }
