"""Logging configuration for the ``textledger`` package.

Library modules obtain loggers through :func:`get_logger` and never attach
handlers themselves. Entry points (the CLI) call :func:`configure_logging`
once to attach a single stderr handler to the ``"textledger"`` logger.

Level resolution order: explicit argument, then the ``TEXTLEDGER_LOG_LEVEL``
environment variable, then ``WARNING`` (report output goes to stdout and
should stay clean by default).
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "textledger"
_ENV_LEVEL = "TEXTLEDGER_LOG_LEVEL"
_DEFAULT_FORMAT = "%(levelname)s %(name)s: %(message)s"

_handler: logging.Handler | None = None


def resolve_level(level: int | str | None = None) -> int:
    """Turn an int, a level name or a numeric string into a logging level."""

    if level is None:
        level = os.getenv(_ENV_LEVEL) or logging.WARNING
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelName(name)
    if isinstance(numeric, int):
        return numeric
    raise ValueError(f"unknown log level: {level!r}")


def level_from_verbosity(verbose: int) -> int | None:
    """Map repeated ``-v`` flags to a level; ``0`` defers to the environment."""

    if verbose <= 0:
        return None
    return logging.INFO if verbose == 1 else logging.DEBUG


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Attach the package handler exactly once; later calls only adjust the level."""

    global _handler
    logger = logging.getLogger(_PKG_LOGGER_NAME)
    resolved = resolve_level(level)

    if _handler is None:
        for h in list(logger.handlers):
            if isinstance(h, logging.NullHandler):
                logger.removeHandler(h)
        _handler = logging.StreamHandler(stream or sys.stderr)
        _handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))
        logger.addHandler(_handler)
        logger.propagate = False

    _handler.setLevel(resolved)
    logger.setLevel(resolved)


def reset_logging() -> None:
    """Detach the package handler (used by tests and embedding hosts)."""

    global _handler
    logger = logging.getLogger(_PKG_LOGGER_NAME)
    if _handler is not None:
        logger.removeHandler(_handler)
        _handler = None
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def get_logger(name: str) -> logging.Logger:
    """Return a logger; keeps the package silent until configured."""

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if _handler is None and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = [
    "configure_logging",
    "get_logger",
    "level_from_verbosity",
    "reset_logging",
    "resolve_level",
]
