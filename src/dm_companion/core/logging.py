"""Structured logging for the DM Companion.

Every module logs through structlog with short event names and key-value
fields, e.g. ``logger.info("Encounter generated", total_xp=1800)``. Output
is a colored console stream while ``DM_COMPANION_DEBUG`` is set and one JSON
object per line otherwise; both formats carry the application name and
version plus whatever account context the current session has bound.

Example:
    >>> from dm_companion.core.logging import bind_context, get_logger
    >>> logger = get_logger(__name__)
    >>> bind_context(account="dm")
    >>> logger.info("Custom encounter saved", folder="Act 1", total_xp=350)
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor

from dm_companion import __version__
from dm_companion.core.config import get_settings


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger


NOISY_LIBRARY_LOGGERS: tuple[str, ...] = ("urllib3", "requests")
"""Library loggers held at WARNING so SRD fetches do not flood the output."""

_STDLIB_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Stamp each event with the application name and version."""
    event_dict.setdefault("app", "dm_companion")
    event_dict.setdefault("version", __version__)
    return event_dict


def _renderer(json_format: bool) -> list[Processor]:
    if json_format:
        return [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [
        structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        ),
    ]


def configure_logging(
    *,
    level: str | None = None,
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """Configure structlog and the standard library root logger.

    Arguments left as None fall back to the application settings:
    ``log_level`` for the level, and JSON output unless ``debug`` is on.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Render one JSON object per event instead of console text.
        log_file: Also append standard library records to this file.

    Example:
        >>> configure_logging(level="DEBUG", json_format=False)
    """
    settings = get_settings()
    level_name = (level or settings.log_level).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)
    if json_format is None:
        json_format = settings.is_production

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        *_renderer(json_format),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format=_STDLIB_FORMAT, level=numeric_level, stream=sys.stdout, force=True)
    for name in NOISY_LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(_STDLIB_FORMAT))
        logging.getLogger().addHandler(file_handler)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Return a structlog logger, usually ``get_logger(__name__)``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Attach fields to every event logged from this context.

    UserSession binds ``account`` at login so storage and encounter events
    can be traced back to the account that caused them.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop all bound fields; called at logout."""
    structlog.contextvars.clear_contextvars()


__all__ = [
    "NOISY_LIBRARY_LOGGERS",
    "add_app_context",
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
