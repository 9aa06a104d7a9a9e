"""Credential record shared by the registration and login flows."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class CredentialRecord:
    """Username/password pair decoded from one request."""

    username: str
    password: str

    def with_password_hash(self, password_hash: str) -> CredentialRecord:
        """Return a copy whose password field holds the hashed form."""

        return replace(self, password=password_hash)


def has_complete_credentials(record: CredentialRecord) -> bool:
    """Return whether both username and password are present."""

    return record.username != "" and record.password != ""
