"""
structlog setup.

Events are rendered as JSON lines in staging and production and as
coloured console output in development. Request middleware binds
``request_id`` and ``tenant_id`` through contextvars, so every event
logged while serving a request carries both.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from src.config.settings import get_settings

# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS = ("fpdf", "fontTools", "aiosqlite", "uvicorn.access")


def add_service_info(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    settings = get_settings()
    event_dict.setdefault("service", settings.app_name)
    event_dict.setdefault("version", settings.app_version)
    return event_dict


def drop_empty_tenant(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Health checks and preflight requests carry no tenant; leave the key out."""
    if event_dict.get("tenant_id") is None:
        event_dict.pop("tenant_id", None)
    return event_dict


def _renderer(environment: str) -> list[Processor]:
    if environment == "development":
        return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


def configure_logging() -> None:
    """Route structlog through the stdlib root logger at the configured level."""
    settings = get_settings()
    level = logging.getLevelName(settings.log_level)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        drop_empty_tenant,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        add_service_info,
        *_renderer(settings.environment),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
