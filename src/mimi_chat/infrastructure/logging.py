"""Process-wide logging configuration for the chat API."""

from __future__ import annotations

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def resolve_log_level(level: str) -> int:
    """Map a configured level name to a logging constant, defaulting to INFO."""

    normalized_level = level.strip().upper() if level.strip() else "INFO"
    resolved_level = getattr(logging, normalized_level, logging.INFO)
    return resolved_level if isinstance(resolved_level, int) else logging.INFO


def configure_logging(*, level: str) -> None:
    """Configure root logging with the shared format and runtime level."""

    logging.basicConfig(
        level=resolve_log_level(level),
        format=_LOG_FORMAT,
    )
