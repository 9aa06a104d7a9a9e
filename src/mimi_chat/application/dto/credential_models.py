"""Pydantic models for register/login request and response bodies."""

from __future__ import annotations

from datetime import datetime

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from mimi_chat.application.ports.credential_store_port import StoredCredential
from mimi_chat.domain.auth.credentials import CredentialRecord


class StrictModel(BaseModel):
    """Base model with strict unknown-field rejection."""

    model_config = ConfigDict(extra="forbid")


class MalformedPayloadError(ValueError):
    """Raised when a request body is not a valid credential payload."""


class CredentialPayload(StrictModel):
    """Register/login request body contract.

    Absent and null fields decode as empty strings so the completeness
    check can report them separately from structural errors. A bare
    ``null`` body decodes as an empty payload.
    """

    username: str = ""
    password: str = ""

    @model_validator(mode="before")
    @classmethod
    def _null_body_as_empty(cls, data: Any) -> Any:
        return {} if data is None else data

    @field_validator("username", "password", mode="before")
    @classmethod
    def _null_field_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class CredentialResponse(StrictModel):
    """Success body echoing the stored account row."""

    id: int
    username: str
    password: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_stored(cls, credential: StoredCredential) -> CredentialResponse:
        return cls(
            id=credential.user_id,
            username=credential.username,
            password=credential.password_hash,
            created_at=credential.created_at,
            updated_at=credential.updated_at,
        )


def describe_validation_error(error: ValidationError) -> str:
    """Summarize validation failures by location and type, never by input value."""

    parts = []
    for detail in error.errors(include_url=False, include_context=False, include_input=False):
        location = ".".join(str(item) for item in detail["loc"]) or "<body>"
        parts.append(f"{location}:{detail['type']}")
    return ",".join(parts)


def decode_credential_payload(raw_body: bytes) -> CredentialRecord:
    """Parse one raw request body into a credential record."""

    try:
        payload = CredentialPayload.model_validate_json(raw_body)
    except ValidationError as error:
        raise MalformedPayloadError(describe_validation_error(error)) from error
    return CredentialRecord(username=payload.username, password=payload.password)
