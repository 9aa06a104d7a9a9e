"""SQLAlchemy adapter for credential lookup and insert operations."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import cast

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mimi_chat.application.ports.credential_store_port import (
    CredentialCreateInput,
    CredentialStorePort,
    CredentialStoreWriteError,
    DuplicateUsernameWriteError,
    StoredCredential,
)
from mimi_chat.infrastructure.db.metadata import users

logger = logging.getLogger(__name__)

_CREDENTIAL_COLUMNS = (
    users.c.id,
    users.c.username,
    users.c.password_hash,
    users.c.created_at,
    users.c.updated_at,
)


def _is_duplicate_username_error(error: IntegrityError) -> bool:
    message = str(error.orig).lower()
    return "uq_users_username" in message or "users.username" in message


class SqlAlchemyCredentialRepository(CredentialStorePort):
    """Credential store backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def exists(self, *, username: str) -> bool:
        """Return whether username is stored; lookup errors report False."""

        statement = sa.select(users.c.id).where(users.c.username == username).limit(1)

        try:
            async with self._session_factory() as session:
                result = await session.execute(statement)
        except SQLAlchemyError as error:
            # Store outages are indistinguishable from "available" here.
            logger.warning(
                "credential_exists_lookup_failed username=%s error=%s",
                username,
                error,
            )
            return False

        return result.first() is not None

    async def create(self, payload: CredentialCreateInput) -> StoredCredential:
        """Insert one credential row and return the persisted record."""

        statement = (
            sa.insert(users)
            .values(username=payload.username, password_hash=payload.password_hash)
            .returning(*_CREDENTIAL_COLUMNS)
        )

        async with self._session_factory() as session:
            try:
                result = await session.execute(statement)
                await session.commit()
            except IntegrityError as error:
                await session.rollback()
                if _is_duplicate_username_error(error):
                    raise DuplicateUsernameWriteError(
                        f"Duplicate username: {payload.username}"
                    ) from error
                raise CredentialStoreWriteError(str(error)) from error
            except SQLAlchemyError as error:
                await session.rollback()
                raise CredentialStoreWriteError(str(error)) from error

        row = result.mappings().one()
        return _to_stored_credential(row)

    async def fetch(self, *, username: str) -> StoredCredential | None:
        """Return stored credential by exact username; lookup errors report None."""

        statement = sa.select(*_CREDENTIAL_COLUMNS).where(users.c.username == username).limit(1)

        try:
            async with self._session_factory() as session:
                result = await session.execute(statement)
        except SQLAlchemyError as error:
            logger.warning(
                "credential_fetch_lookup_failed username=%s error=%s",
                username,
                error,
            )
            return None

        row = result.mappings().first()
        if row is None:
            return None
        return _to_stored_credential(row)


def _to_stored_credential(row: sa.RowMapping) -> StoredCredential:
    return StoredCredential(
        user_id=int(row["id"]),
        username=cast(str, row["username"]),
        password_hash=cast(str, row["password_hash"]),
        created_at=cast(datetime, row["created_at"]),
        updated_at=cast(datetime, row["updated_at"]),
    )
