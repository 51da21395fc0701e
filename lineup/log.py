"""Logging setup on top of Loguru.

Diagnostics go to stderr so they never mix with report output on stdout.
"""

from __future__ import annotations

import sys
from contextlib import suppress
from typing import TYPE_CHECKING, Literal

from loguru import logger

if TYPE_CHECKING:
    from loguru import Logger

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_CURRENT_LEVEL: str | None = None
_HANDLER_IDS: list[int] = []


def configure_logging(level: LogLevel = "WARNING", force_reconfigure: bool = False) -> None:
    """Install a single stderr sink at ``level``. Idempotent."""
    global _CURRENT_LEVEL

    if not force_reconfigure and level == _CURRENT_LEVEL:
        return

    # Only remove our own sinks; pytest and callers may have added theirs
    for handler_id in _HANDLER_IDS:
        with suppress(ValueError):
            logger.remove(handler_id)
    _HANDLER_IDS.clear()
    if _CURRENT_LEVEL is None:
        # Drop Loguru's default DEBUG sink on first configuration
        with suppress(ValueError):
            logger.remove(0)

    use_color = sys.stderr.isatty()
    handler_id = logger.add(
        sink=sys.stderr,
        level=level,
        format="<level>{level: <8}</level> <cyan>{extra[module]}</cyan> | {message}",
        colorize=use_color,
        backtrace=False,
        diagnose=False,
    )
    _HANDLER_IDS.append(handler_id)
    _CURRENT_LEVEL = level


def get_logger(name: str) -> Logger:
    """Logger bound with the calling module's name."""
    return logger.bind(module=name)
