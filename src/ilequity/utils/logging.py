"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.types import Processor

ROOT_LOGGER = "ilequity"


def configure_logging(log_format: str | None = None, debug: bool = False) -> None:
    """Configure structlog for the CLI.

    ``log_format="json"`` renders one JSON object per event; anything else
    uses the console renderer. Events go through the stdlib ``ilequity``
    logger to stderr so command output on stdout stays parseable.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if (log_format or "").lower() == "json":
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer(colors=False)]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root = logging.getLogger(ROOT_LOGGER)
    root.handlers = [handler]
    root.setLevel(logging.DEBUG if debug else logging.WARNING)
    root.propagate = False


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger backed by the stdlib logger ``name``.

    Until ``configure_logging`` runs, events fall through to the stdlib
    defaults, so library use emits nothing below WARNING.
    """
    return structlog.wrap_logger(logging.getLogger(name))  # type: ignore[no-any-return]
