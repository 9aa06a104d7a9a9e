"""chat-api entrypoint and HTTP route wiring."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from mimi_chat.application.services.credential_service import CredentialService
from mimi_chat.config.settings import Settings, load_settings
from mimi_chat.infrastructure.db.credential_repository import SqlAlchemyCredentialRepository
from mimi_chat.infrastructure.db.session import create_session_factory, ensure_schema
from mimi_chat.infrastructure.http.credential_router import build_credential_router
from mimi_chat.infrastructure.logging import configure_logging
from mimi_chat.infrastructure.security.password_hasher import BcryptPasswordHasher

logger = logging.getLogger(__name__)


def build_credential_service(database_url: str) -> CredentialService:
    """Build credential service with SQLAlchemy-backed dependencies."""

    session_factory = create_session_factory(database_url)
    return CredentialService(
        store=SqlAlchemyCredentialRepository(session_factory),
        password_hasher=BcryptPasswordHasher(),
    )


def create_app(
    *,
    settings: Settings | None = None,
    credential_service: CredentialService | None = None,
) -> FastAPI:
    """Create FastAPI app exposing the register and login routes."""

    if settings is None:
        settings = load_settings()
    if credential_service is None:
        credential_service = build_credential_service(settings.database_url)

    database_url = settings.database_url
    auto_create_schema = settings.auto_create_schema

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        if auto_create_schema:
            await ensure_schema(database_url)
            logger.info("schema_ready auto_create_schema=true")
        yield

    app = FastAPI(lifespan=lifespan)
    app.include_router(build_credential_router(credential_service=credential_service))
    return app


def run_asgi_server(*, settings: Settings) -> None:
    """Serve the chat API on the configured host and port."""

    app = create_app(settings=settings)
    logger.info("Server started at http://%s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


def main() -> None:
    """Run chat-api runtime process."""

    settings = load_settings()
    configure_logging(level=settings.log_level)
    run_asgi_server(settings=settings)


if __name__ == "__main__":
    main()
