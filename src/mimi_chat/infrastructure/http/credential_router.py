"""FastAPI router for account registration and login endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from mimi_chat.application.dto.credential_models import CredentialResponse
from mimi_chat.application.ports.credential_store_port import StoredCredential
from mimi_chat.application.services.credential_service import (
    CredentialService,
    LoginOutcome,
    RegistrationOutcome,
)

MALFORMED_PAYLOAD_MESSAGE = "Invalid request payload"

_REGISTRATION_FAILURES: dict[RegistrationOutcome, tuple[int, str]] = {
    RegistrationOutcome.MALFORMED_PAYLOAD: (400, MALFORMED_PAYLOAD_MESSAGE),
    RegistrationOutcome.INCOMPLETE_CREDENTIALS: (400, "Username or Password are missing."),
    RegistrationOutcome.DUPLICATE_USERNAME: (409, "Username already registed."),
    RegistrationOutcome.HASHING_FAILURE: (500, "Error setting the password"),
    RegistrationOutcome.STORE_WRITE_FAILURE: (500, "Error creating user"),
}

_LOGIN_FAILURES: dict[LoginOutcome, tuple[int, str]] = {
    LoginOutcome.MALFORMED_PAYLOAD: (400, MALFORMED_PAYLOAD_MESSAGE),
    LoginOutcome.USER_NOT_FOUND: (404, "User not found"),
    LoginOutcome.INVALID_PASSWORD: (401, "Invalid password"),
    LoginOutcome.HASH_VERIFICATION_FAILURE: (401, "Invalid password"),
}


def build_credential_router(*, credential_service: CredentialService) -> APIRouter:
    """Build router exposing register and login endpoints."""

    router = APIRouter(prefix="/api/v1", tags=["auth"])

    @router.post("/register", status_code=201, response_model=None)
    async def register(request: Request) -> Response:
        raw_body = await request.body()
        result = await credential_service.register(raw_body=raw_body)

        if result.outcome is not RegistrationOutcome.CREATED:
            status_code, message = _REGISTRATION_FAILURES[result.outcome]
            return PlainTextResponse(message, status_code=status_code)

        assert result.credential is not None
        return _credential_response(result.credential, status_code=201)

    @router.post("/login", status_code=200, response_model=None)
    async def login(request: Request) -> Response:
        raw_body = await request.body()
        result = await credential_service.login(raw_body=raw_body)

        if result.outcome is not LoginOutcome.SUCCESS:
            status_code, message = _LOGIN_FAILURES[result.outcome]
            return PlainTextResponse(message, status_code=status_code)

        assert result.credential is not None
        return _credential_response(result.credential, status_code=200)

    return router


def _credential_response(credential: StoredCredential, *, status_code: int) -> JSONResponse:
    """Echo the stored account row, hash included, as the success body."""

    body = CredentialResponse.from_stored(credential)
    return JSONResponse(body.model_dump(mode="json"), status_code=status_code)
