"""Structured logging configuration.

This module initializes structlog with a stable JSON event format.
Events are routed through stdlib logging so applications choose the sink.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

_STRUCTLOG_CONFIGURED = False


def get_logger(name: str) -> Any:
    """Return a module logger bound to a stdlib logger of the same name.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger emitting one JSON object per event.
    """
    _configure_structlog()
    return structlog.get_logger(name)


def configure_logging(level: int = logging.INFO) -> None:
    """Attach a stderr handler for command-line runs.

    Args:
        level: Minimum stdlib level to emit.
    """
    logging.basicConfig(level=level, stream=sys.stderr, format="%(message)s")
    logging.getLogger().setLevel(level)


def _configure_structlog() -> None:
    global _STRUCTLOG_CONFIGURED
    if _STRUCTLOG_CONFIGURED:
        return
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _STRUCTLOG_CONFIGURED = True
