import os
import ssl
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def _ssl_connect_args() -> dict[str, Any]:
    """asyncpg ``connect_args`` for SSL when DATABASE_SSL is set."""
    mode = os.environ.get("DATABASE_SSL", "").lower()
    if not mode or mode == "disable":
        return {}
    cert_path = os.environ.get("RDS_SSL_CERT", "")
    if cert_path and os.path.exists(cert_path):
        return {"connect_args": {"ssl": ssl.create_default_context(cafile=cert_path)}}
    return {"connect_args": {"ssl": "require"}}


def get_async_engine(database_url: str, **kwargs: Any) -> AsyncEngine:
    return create_async_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        pool_recycle=3600,
        **{**_ssl_connect_args(), **kwargs},
    )


def get_async_session_factory(
    database_url: str,
    *,
    expire_on_commit: bool = False,
    **engine_kwargs: Any,
) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        get_async_engine(database_url, **engine_kwargs),
        class_=AsyncSession,
        expire_on_commit=expire_on_commit,
        autoflush=False,
    )
