"""
Structured logging for the reminder core, built on structlog.

Reminder events carry wall-clock datetimes (scheduled_for, snooze_until,
...). They are rendered as ISO strings so console and JSON output agree
and the JSON renderer never falls back to repr().
"""

import logging
import sys
from datetime import date, datetime, time
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from qc_reminders.config.settings import get_settings

# Libraries whose DEBUG output is per-statement noise
QUIET_LOGGERS = ("aiosqlite",)


def add_app_context(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    settings = get_settings()
    event_dict.setdefault("app", settings.app_name)
    event_dict.setdefault("version", settings.app_version)
    event_dict.setdefault("environment", settings.environment)
    return event_dict


def render_temporal_values(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Render date, time and datetime values as ISO strings."""
    for key, value in event_dict.items():
        if isinstance(value, (datetime, date, time)):
            event_dict[key] = value.isoformat()
    return event_dict


def _renderer(environment: str) -> list[Processor]:
    if environment == "development":
        return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


def configure_logging(level: str | None = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        level: Overrides settings.log_level, e.g. "DEBUG" in a scheduler shell.
    """
    settings = get_settings()
    level = level or settings.log_level

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=False),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
        render_temporal_values,
    ]
    processors.extend(_renderer(settings.environment))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=getattr(logging, level))
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def bind_owner(owner_id: str) -> None:
    """Attach owner_id to every event logged in the current context."""
    structlog.contextvars.bind_contextvars(owner_id=owner_id)


def clear_owner() -> None:
    structlog.contextvars.unbind_contextvars("owner_id")
