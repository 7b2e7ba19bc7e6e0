"""Async engine construction and declarative base."""

from __future__ import annotations

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from pingpong.config import Settings


class Base(DeclarativeBase):
    pass


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured database.

    Creating the engine does not connect; the first connection is opened by
    the liveness probe. ``pool_pre_ping`` lets a request heal a pooled
    connection that the server dropped in the meantime.
    """
    url: URL = settings.sqlalchemy_url
    connect_args: dict = {}
    if url.drivername == "postgresql+asyncpg":
        connect_args = {
            "timeout": settings.db_timeout,
            "command_timeout": settings.db_timeout,
            "ssl": settings.postgres_sslmode,
        }
    return create_async_engine(
        url,
        pool_pre_ping=True,
        connect_args=connect_args,
    )
