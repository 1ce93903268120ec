"""
structlog setup for the diary service.

Console rendering in development, one JSON object per line elsewhere.
Every event carries the app name, version and environment, plus the
request id while a request is being handled.
"""

import logging
import sys

import structlog
from structlog.types import EventDict, Processor

from propdiary.config.settings import Settings, get_settings

# Third-party loggers that are chatty at INFO
QUIET_LOGGERS = ("aiosqlite", "uvicorn.access")


def add_app_context(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Stamp every event with app name, version and environment."""
    settings = get_settings()
    event_dict.setdefault("app", settings.app_name)
    event_dict.setdefault("version", settings.app_version)
    event_dict.setdefault("environment", settings.environment)
    return event_dict


def drop_none_values(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Leave out keys logged as None (optional ids, tracebacks on 4xx)."""
    return {k: v for k, v in event_dict.items() if v is not None}


def build_processors(settings: Settings, json_output: bool | None = None) -> list[Processor]:
    """
    Processor chain for the given settings.

    Args:
        settings: Application settings.
        json_output: Force JSON (True) or console (False) rendering;
            by default JSON is used outside development.
    """
    if json_output is None:
        json_output = settings.environment != "development"

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        drop_none_values,
        add_app_context,
    ]
    if json_output:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    return processors


def configure_logging(json_output: bool | None = None) -> None:
    """Configure structlog and the stdlib root logger from settings."""
    settings = get_settings()

    structlog.configure(
        processors=build_processors(settings, json_output),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    level = logging.getLevelName(settings.log_level)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger().setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Logger for a module; configuration is picked up on first use."""
    return structlog.get_logger(name)
