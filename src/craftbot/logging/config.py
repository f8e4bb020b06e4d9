# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""structlog setup for craftbot.

Everything goes to stderr. ``CRAFTBOT_LOG_LEVEL`` filters (default INFO) and
``CRAFTBOT_LOG_FORMAT=json`` switches to one JSON object per line for fleets
whose output is collected by a supervisor.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from craftbot.settings import Settings

__all__ = ["get_logger", "configure_logging"]


def _renderer(log_format: str) -> Any:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog once at startup.

    Args:
        settings: Settings instance (will be created if None)
    """
    if settings is None:
        from craftbot.settings import Settings

        settings = Settings()

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if settings.log_format == "json":
        processors.append(structlog.processors.format_exc_info)
    processors.append(_renderer(settings.log_format))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Return a structlog logger; agents bind ``agent=<id>`` on top of it."""
    return structlog.get_logger(name)
