"""Logging helpers that render JSON lines carrying the request trace identifier."""

from __future__ import annotations

import logging
from contextvars import ContextVar, Token
from logging.config import dictConfig
from typing import Any

import structlog
from structlog.typing import EventDict, WrappedLogger

from demo_service.config.settings import Settings

ACCESS_LOGGER = "demo_service.access"

_TRACE_ID: ContextVar[str] = ContextVar("trace_id", default="-")


def bind_trace_id(trace_id: str) -> Token[str]:
    """Bind the provided trace identifier in the current context."""

    return _TRACE_ID.set(trace_id)


def reset_trace_id(token: Token[str]) -> None:
    """Restore the previous trace identifier from a token."""

    _TRACE_ID.reset(token)


def current_trace_id() -> str:
    return _TRACE_ID.get()


def add_trace_id(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Inject the context-bound trace id unless the caller supplied one."""

    event_dict.setdefault("trace_id", _TRACE_ID.get())
    return event_dict


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        add_trace_id,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def build_json_formatter() -> structlog.stdlib.ProcessorFormatter:
    """Return the formatter rendering every record as one JSON object."""

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.EventRenamer("message"),
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
    )


def configure_logging(settings: Settings) -> None:
    """Configure application logging using the provided settings.

    Every record, whether emitted through ``logging`` or ``structlog``, is
    written to stdout as one JSON object per line.
    """

    log_level = settings.log_level.upper()
    shared_processors = _shared_processors()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"json": {"()": build_json_formatter}},
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "stream": "ext://sys.stdout",
                }
            },
            "loggers": {
                "": {
                    "handlers": ["default"],
                    "level": log_level,
                },
                # Request records are emitted regardless of LOG_LEVEL.
                ACCESS_LOGGER: {"level": "INFO"},
                "uvicorn": {
                    "handlers": ["default"],
                    "level": log_level,
                    "propagate": False,
                },
                "uvicorn.error": {
                    "handlers": ["default"],
                    "level": log_level,
                    "propagate": False,
                },
                "uvicorn.access": {
                    "handlers": ["default"],
                    "level": log_level,
                    "propagate": False,
                },
            },
        }
    )

    logging.getLogger(__name__).debug("Logging configured at level %s", log_level)
