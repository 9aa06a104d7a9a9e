"""Application service for account registration and login."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import StrEnum

from mimi_chat.application.dto.credential_models import (
    MalformedPayloadError,
    decode_credential_payload,
)
from mimi_chat.application.ports.credential_store_port import (
    CredentialCreateInput,
    CredentialStorePort,
    CredentialStoreWriteError,
    DuplicateUsernameWriteError,
    StoredCredential,
)
from mimi_chat.application.ports.password_hasher_port import (
    HashVerificationError,
    PasswordHasherPort,
    PasswordHashingError,
)
from mimi_chat.domain.auth.credentials import has_complete_credentials

logger = logging.getLogger(__name__)


class RegistrationOutcome(StrEnum):
    """Terminal states of the registration pipeline."""

    CREATED = "created"
    MALFORMED_PAYLOAD = "malformed_payload"
    INCOMPLETE_CREDENTIALS = "incomplete_credentials"
    DUPLICATE_USERNAME = "duplicate_username"
    HASHING_FAILURE = "hashing_failure"
    STORE_WRITE_FAILURE = "store_write_failure"


class LoginOutcome(StrEnum):
    """Terminal states of the login pipeline."""

    SUCCESS = "success"
    MALFORMED_PAYLOAD = "malformed_payload"
    USER_NOT_FOUND = "user_not_found"
    INVALID_PASSWORD = "invalid_password"
    HASH_VERIFICATION_FAILURE = "hash_verification_failure"


@dataclass(frozen=True)
class RegistrationResult:
    """Registration result model."""

    outcome: RegistrationOutcome
    credential: StoredCredential | None = None


@dataclass(frozen=True)
class LoginResult:
    """Login result model."""

    outcome: LoginOutcome
    credential: StoredCredential | None = None


class CredentialService:
    """Run the register and login pipelines against one credential store."""

    def __init__(
        self,
        *,
        store: CredentialStorePort,
        password_hasher: PasswordHasherPort,
    ) -> None:
        self._store = store
        self._password_hasher = password_hasher

    async def register(self, *, raw_body: bytes) -> RegistrationResult:
        """Decode, validate, de-duplicate, hash and persist one new account.

        Stages short-circuit in order: malformed payload, incomplete
        credentials, duplicate username, hashing failure, store write failure.
        """

        try:
            record = decode_credential_payload(raw_body)
        except MalformedPayloadError as error:
            logger.warning("register_rejected outcome=malformed_payload error=%s", error)
            return RegistrationResult(outcome=RegistrationOutcome.MALFORMED_PAYLOAD)

        if not has_complete_credentials(record):
            logger.warning(
                "register_rejected outcome=incomplete_credentials has_username=%s has_password=%s",
                bool(record.username),
                bool(record.password),
            )
            return RegistrationResult(outcome=RegistrationOutcome.INCOMPLETE_CREDENTIALS)

        if await self._store.exists(username=record.username):
            logger.warning(
                "register_rejected outcome=duplicate_username username=%s",
                record.username,
            )
            return RegistrationResult(outcome=RegistrationOutcome.DUPLICATE_USERNAME)

        try:
            password_hash = await asyncio.to_thread(
                self._password_hasher.hash_password,
                record.password,
            )
        except PasswordHashingError as error:
            logger.error(
                "register_failed outcome=hashing_failure username=%s error=%s",
                record.username,
                error,
            )
            return RegistrationResult(outcome=RegistrationOutcome.HASHING_FAILURE)
        record = record.with_password_hash(password_hash)

        try:
            stored = await self._store.create(
                CredentialCreateInput(username=record.username, password_hash=record.password)
            )
        except DuplicateUsernameWriteError as error:
            logger.error(
                "register_failed outcome=store_write_failure reason=concurrent_duplicate "
                "username=%s error=%s",
                record.username,
                error,
            )
            return RegistrationResult(outcome=RegistrationOutcome.STORE_WRITE_FAILURE)
        except CredentialStoreWriteError as error:
            logger.error(
                "register_failed outcome=store_write_failure username=%s error=%s",
                record.username,
                error,
            )
            return RegistrationResult(outcome=RegistrationOutcome.STORE_WRITE_FAILURE)

        logger.info(
            "register_succeeded username=%s user_id=%s",
            stored.username,
            stored.user_id,
        )
        return RegistrationResult(outcome=RegistrationOutcome.CREATED, credential=stored)

    async def login(self, *, raw_body: bytes) -> LoginResult:
        """Decode credentials, fetch the stored account and verify the password."""

        try:
            record = decode_credential_payload(raw_body)
        except MalformedPayloadError as error:
            logger.warning("login_rejected outcome=malformed_payload error=%s", error)
            return LoginResult(outcome=LoginOutcome.MALFORMED_PAYLOAD)

        stored = await self._store.fetch(username=record.username)
        if stored is None:
            logger.warning("login_rejected outcome=user_not_found username=%s", record.username)
            return LoginResult(outcome=LoginOutcome.USER_NOT_FOUND)

        try:
            matched = await asyncio.to_thread(
                self._password_hasher.verify_password,
                password=record.password,
                password_hash=stored.password_hash,
            )
        except HashVerificationError as error:
            logger.error(
                "login_failed outcome=hash_verification_failure username=%s error=%s",
                record.username,
                error,
            )
            return LoginResult(outcome=LoginOutcome.HASH_VERIFICATION_FAILURE)

        if not matched:
            logger.warning("login_rejected outcome=invalid_password username=%s", record.username)
            return LoginResult(outcome=LoginOutcome.INVALID_PASSWORD)

        logger.info("login_succeeded username=%s user_id=%s", stored.username, stored.user_id)
        return LoginResult(outcome=LoginOutcome.SUCCESS, credential=stored)
