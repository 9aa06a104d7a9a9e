"""Alembic migration runner for the mimi-chat users schema."""

from __future__ import annotations

import asyncio
import os
from logging.config import fileConfig
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy import engine_from_config, pool
from sqlalchemy.engine import Connection, make_url
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context
from mimi_chat.infrastructure.db.metadata import metadata

INI_DEFAULT_URL = "sqlite:///./mimi-chat.db"

config = context.config


def resolve_migration_url() -> str:
    """Pick the URL to migrate: a caller-set URL wins over DATABASE_URL from .env."""

    load_dotenv(Path(__file__).resolve().parents[1] / ".env")
    ini_url = config.get_main_option("sqlalchemy.url") or INI_DEFAULT_URL
    env_url = os.getenv("DATABASE_URL")
    if env_url and ini_url == INI_DEFAULT_URL:
        return env_url
    return ini_url


def uses_async_dialect(url: str) -> bool:
    """Any installed asyncio driver (aiosqlite today) routes through run_sync."""

    return bool(make_url(url).get_dialect().is_async)


def _apply_migrations(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=metadata)
    with context.begin_transaction():
        context.run_migrations()


def _engine_options(url: str) -> dict[str, str]:
    options = dict(config.get_section(config.config_ini_section, {}))
    options["sqlalchemy.url"] = url
    return options


async def _migrate_with_async_engine(url: str) -> None:
    engine = async_engine_from_config(
        _engine_options(url),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_apply_migrations)
    finally:
        await engine.dispose()


def _migrate_with_sync_engine(url: str) -> None:
    engine = engine_from_config(
        _engine_options(url),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with engine.connect() as connection:
        _apply_migrations(connection)


def _emit_sql(url: str) -> None:
    context.configure(
        url=url,
        target_metadata=metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

migration_url = resolve_migration_url()
if context.is_offline_mode():
    _emit_sql(migration_url)
elif uses_async_dialect(migration_url):
    asyncio.run(_migrate_with_async_engine(migration_url))
else:
    _migrate_with_sync_engine(migration_url)
