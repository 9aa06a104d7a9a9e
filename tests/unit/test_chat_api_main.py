from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI

from apps.chat_api import main as chat_api_main
from mimi_chat.config.settings import Settings


def _settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        HOST="127.0.0.1",
        PORT=9090,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'main.db'}",
        AUTO_CREATE_SCHEMA=False,
        LOG_LEVEL="WARNING",
    )


def test_run_asgi_server_uses_configured_host_and_port(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    calls: list[dict[str, Any]] = []

    def fake_run(app: object, **kwargs: Any) -> None:
        calls.append({"app": app, **kwargs})

    monkeypatch.setattr(chat_api_main.uvicorn, "run", fake_run)

    chat_api_main.run_asgi_server(settings=_settings(tmp_path))

    assert len(calls) == 1
    assert isinstance(calls[0]["app"], FastAPI)
    assert calls[0]["host"] == "127.0.0.1"
    assert calls[0]["port"] == 9090


def test_main_configures_logging_from_settings(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    settings = _settings(tmp_path)
    levels: list[str] = []
    served: list[Settings] = []

    monkeypatch.setattr(chat_api_main, "load_settings", lambda: settings)
    monkeypatch.setattr(
        chat_api_main,
        "configure_logging",
        lambda *, level: levels.append(level),
    )
    monkeypatch.setattr(
        chat_api_main,
        "run_asgi_server",
        lambda *, settings: served.append(settings),
    )

    chat_api_main.main()

    assert levels == ["WARNING"]
    assert served == [settings]
