"""Async SQLAlchemy session factory and schema helpers."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from mimi_chat.infrastructure.db.metadata import metadata


def create_session_factory(database_url: str) -> async_sessionmaker[AsyncSession]:
    """Create a reusable async session factory for the provided database URL."""

    engine = create_async_engine(database_url)
    return async_sessionmaker(engine, expire_on_commit=False)


async def ensure_schema(database_url: str) -> None:
    """Create any missing tables for the provided database URL."""

    engine = create_async_engine(database_url)
    try:
        async with engine.begin() as connection:
            await connection.run_sync(metadata.create_all)
    finally:
        await engine.dispose()
