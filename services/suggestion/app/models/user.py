"""
Read model of the identity ``users`` table.

The identity service owns the schema; this service only selects from it to
turn ranked user ids into renderable profiles.
"""
from __future__ import annotations

from datetime import datetime

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.postgres import Base

from app.models.enums import UserType


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(sa.String(64), primary_key=True)
    # Public @handle; candidates may reference a user by handle instead of id
    handle: Mapped[str | None] = mapped_column(sa.String(50), unique=True, nullable=True)
    # NULL for half-created accounts; such users are never suggested
    type: Mapped[UserType | None] = mapped_column(
        sa.Enum(
            UserType,
            name="usertype",
            create_type=False,
            values_callable=lambda e: [x.value for x in e],
        ),
        nullable=True,
    )
    display_name: Mapped[str] = mapped_column(sa.String(150), nullable=False)
    overview: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(sa.String(500), nullable=True)
    cover_url: Mapped[str | None] = mapped_column(sa.String(500), nullable=True)
    verified: Mapped[bool] = mapped_column(
        sa.Boolean(), nullable=False, server_default=sa.text("false")
    )
    followers_count: Mapped[int] = mapped_column(
        sa.Integer(), nullable=False, server_default=sa.text("0")
    )
    following_count: Mapped[int] = mapped_column(
        sa.Integer(), nullable=False, server_default=sa.text("0")
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        sa.DateTime(timezone=True), nullable=True
    )
