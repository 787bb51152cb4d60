"""Structured logging for citesync.

All modules log through structlog with key/value context. Every entry is
stamped with the service name and environment; entries emitted while a
session works on a document also carry that document's identity, bound
with document_context(). A process may hold several open documents at
once and a repair warning is only actionable when it names the document.

Output:
- development: human-readable console lines
- production / staging: one JSON object per line
"""

from __future__ import annotations

import logging
import sys
from contextlib import AbstractContextManager
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from citesync.core.config import Settings, get_settings


JSON_ENVIRONMENTS = frozenset({"production", "staging"})

# Third-party loggers that are chatty at INFO
QUIET_LOGGERS = ("httpx", "httpcore")


class ServiceContext:
    """structlog processor stamping entries with service and environment."""

    def __init__(self, settings: Settings) -> None:
        self.service = settings.service_name
        self.environment = settings.environment

    def __call__(
        self,
        logger: WrappedLogger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event_dict.setdefault("service", self.service)
        event_dict.setdefault("environment", self.environment)
        return event_dict


def document_context(document_id: str, **context: Any) -> AbstractContextManager[Any]:
    """Bind a document identity to every entry logged inside the block.

    Example:
        ```python
        with document_context("paper-1"):
            reconciler.spoof()  # repair warnings carry document_id="paper-1"
        ```
    """
    return structlog.contextvars.bound_contextvars(document_id=document_id, **context)


def build_processors(settings: Settings) -> list[Processor]:
    """Processor chain for the configured environment."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        ServiceContext(settings),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if settings.environment in JSON_ENVIRONMENTS:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    return processors


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        settings: Settings to configure from; uses get_settings() if not provided
    """
    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level.upper())

    structlog.configure(
        processors=build_processors(settings),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger.

    Args:
        name: Logger name, normally ``__name__``

    Example:
        ```python
        logger = get_logger(__name__)
        logger.warning("Dropping orphaned citation record", citation_id="cite-1")
        ```
    """
    return structlog.get_logger(name)


__all__ = [
    "ServiceContext",
    "build_processors",
    "configure_logging",
    "document_context",
    "get_logger",
]
