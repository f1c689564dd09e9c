"""Structured logging setup.

Log calls use printf-style placeholders, e.g.
    log.warning("Platform %s: %s will replace %s", key, new, old)
which PositionalArgumentsFormatter renders into the event text.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from structlog.types import Processor


def setup_logging(level: str = "INFO", fmt: str = "plain") -> None:
    """Configure structlog on top of the stdlib root logger.

    Args:
        level: DEBUG, INFO, WARNING or ERROR.
        fmt: "plain" for human-readable console lines, "json" for one
            JSON object per line.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    if fmt.lower() == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    ))
    handler.setLevel(log_level)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)


def get_logger(name: str | None = None, **initial: Any) -> Any:
    """Return a bound logger; keyword arguments become bound context."""
    logger = structlog.get_logger(name)
    return logger.bind(**initial) if initial else logger
