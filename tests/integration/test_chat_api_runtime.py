from __future__ import annotations

from pathlib import Path

import sqlalchemy as sa
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from apps.chat_api.main import create_app
from mimi_chat.config.settings import Settings


def _settings(database_path: Path, *, auto_create_schema: bool) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite+aiosqlite:///{database_path}",
        AUTO_CREATE_SCHEMA=auto_create_schema,
    )


def test_route_paths_are_register_and_login_only(tmp_path: Path) -> None:
    app = create_app(settings=_settings(tmp_path / "routes.db", auto_create_schema=False))

    routes = {
        (route.path, method)
        for route in app.routes
        if isinstance(route, APIRoute)
        for method in route.methods
    }

    assert routes == {("/api/v1/register", "POST"), ("/api/v1/login", "POST")}


def test_non_post_methods_are_rejected(tmp_path: Path) -> None:
    app = create_app(settings=_settings(tmp_path / "methods.db", auto_create_schema=True))

    with TestClient(app) as client:
        register = client.get("/api/v1/register")
        login = client.put("/api/v1/login", json={"username": "a", "password": "b"})

    assert register.status_code == 405
    assert login.status_code == 405


def test_startup_creates_schema_on_fresh_database(tmp_path: Path) -> None:
    database_path = tmp_path / "fresh.db"
    app = create_app(settings=_settings(database_path, auto_create_schema=True))

    with TestClient(app) as client:
        response = client.post(
            "/api/v1/register",
            json={"username": "testuser", "password": "testpass"},
        )

    assert response.status_code == 201

    engine = sa.create_engine(f"sqlite+pysqlite:///{database_path}")
    inspector = sa.inspect(engine)
    assert "users" in inspector.get_table_names()
    unique_constraints = inspector.get_unique_constraints("users")
    assert any(constraint["column_names"] == ["username"] for constraint in unique_constraints)


def test_store_outage_on_register_reports_write_failure(tmp_path: Path) -> None:
    app = create_app(settings=_settings(tmp_path / "no_schema.db", auto_create_schema=False))

    with TestClient(app) as client:
        response = client.post(
            "/api/v1/register",
            json={"username": "testuser", "password": "testpass"},
        )

    assert response.status_code == 500
    assert response.text.strip() == "Error creating user"
