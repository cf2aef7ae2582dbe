"""Structured logging — structlog rendering through stdlib handlers."""

from __future__ import annotations

import logging
import logging.config
import os

import structlog

_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "asyncpg", "aiosqlite")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Route structlog and stdlib records to stdout through one renderer.

    Arguments fall back to the environment:
        FULFILMENT_LOG_LEVEL  — application log level (default: INFO)
        FULFILMENT_LOG_FORMAT — console | json (default: console)
    """
    level = (level or os.environ.get("FULFILMENT_LOG_LEVEL", "INFO")).upper()
    fmt = (fmt or os.environ.get("FULFILMENT_LOG_FORMAT", "console")).lower()

    shared = _shared_processors()
    renderer: structlog.types.Processor
    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    loggers = {name: {"level": "WARNING"} for name in _QUIET_LOGGERS}
    loggers["fulfilment"] = {"level": level}
    loggers["uvicorn.error"] = {"level": "INFO"}

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": shared,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        renderer,
                    ],
                },
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "structlog",
                },
            },
            "root": {"handlers": ["stdout"], "level": level},
            "loggers": loggers,
        }
    )
