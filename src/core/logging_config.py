"""Structured logging configuration.

This module initializes structlog loggers that emit one JSON object per
event on stderr, leaving stdout to CLI command output.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

_DEFAULT_LEVEL = "INFO"


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger filtered at ``KINDSYNC_LOG_LEVEL``.
    """
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_resolve_level()),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
    return structlog.get_logger(name)


def _resolve_level() -> int:
    """Read the minimum log level, falling back to INFO for unknown names."""
    level_name = os.getenv("KINDSYNC_LOG_LEVEL", _DEFAULT_LEVEL).strip().upper()
    level = logging.getLevelName(level_name)
    if isinstance(level, int):
        return level
    return logging.INFO
