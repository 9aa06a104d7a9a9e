"""Port for credential lookup and insert operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True)
class CredentialCreateInput:
    """Insert payload for one new account; the password is already hashed."""

    username: str
    password_hash: str


@dataclass(frozen=True)
class StoredCredential:
    """Persisted account row."""

    user_id: int
    username: str
    password_hash: str
    created_at: datetime
    updated_at: datetime


class CredentialStoreWriteError(RuntimeError):
    """Raised when a credential row cannot be persisted."""


class DuplicateUsernameWriteError(CredentialStoreWriteError):
    """Raised when the store rejects an insert on the username unique constraint."""


class CredentialStorePort(Protocol):
    """Credential store contract."""

    async def exists(self, *, username: str) -> bool:
        """Return whether a row with exactly this username is stored."""

    async def create(self, payload: CredentialCreateInput) -> StoredCredential:
        """Insert one credential row and return it."""

    async def fetch(self, *, username: str) -> StoredCredential | None:
        """Return the row for this username or None."""
