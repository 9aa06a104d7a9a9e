"""Bcrypt password hasher adapter."""

from __future__ import annotations

import bcrypt

from mimi_chat.application.ports.password_hasher_port import (
    HashVerificationError,
    PasswordHasherPort,
    PasswordHashingError,
)

BCRYPT_WORK_FACTOR = 12
_BCRYPT_MAX_PASSWORD_BYTES = 72


class BcryptPasswordHasher(PasswordHasherPort):
    """Password hashing adapter using bcrypt."""

    def hash_password(self, password: str) -> str:
        encoded = password.encode("utf-8")
        if len(encoded) > _BCRYPT_MAX_PASSWORD_BYTES:
            raise PasswordHashingError(
                f"password exceeds {_BCRYPT_MAX_PASSWORD_BYTES} bytes"
            )
        try:
            salt = bcrypt.gensalt(rounds=BCRYPT_WORK_FACTOR)
            return bcrypt.hashpw(encoded, salt).decode("utf-8")
        except (ValueError, OSError) as error:
            raise PasswordHashingError(f"bcrypt hashing failed: {error}") from error

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        encoded = password.encode("utf-8")
        # Stored hashes never come from inputs over the bcrypt limit.
        if len(encoded) > _BCRYPT_MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
        except ValueError as error:
            raise HashVerificationError(f"malformed password hash: {error}") from error
