# disaster_response/logger.py
# ------------------------------------------------------------
# Structured logging (structlog).
#
# JSON lines by default; LOG_FORMAT=console gives human-readable
# output for local runs. Log with the event name first:
#     logger.info("alert_created", sensor_id="seismic-001", severity="critical")
# ------------------------------------------------------------

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from .config import settings


def configure_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Configure structlog processors and the level filter."""
    level_name = (level or settings.log_level).upper()
    level_value = getattr(logging, level_name, logging.INFO)
    fmt = (fmt or settings.log_format).strip().lower()

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_logging()


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a structured logger bound to the module name."""
    return structlog.get_logger(name).bind(logger=name)
