"""Logging for ``hledger_fmt``.

The CLI calls ``configure_logging`` once to send package records to stderr;
stdout carries only journal text. Engine modules fetch loggers through
``get_logger`` and log at DEBUG; they never attach handlers or print.
"""

from __future__ import annotations

import logging
import os
from typing import IO

_PKG_LOGGER_NAME = "hledger_fmt"
_CONFIGURED = False


def _level_from_name(name: str) -> int | None:
    # "10" or "DEBUG".
    name = name.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = getattr(logging, name, None)
    return numeric if isinstance(numeric, int) else None


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        parsed = _level_from_name(level)
        if parsed is not None:
            return parsed
    # Unset or unrecognized: try the environment.
    env_val = os.getenv("HLEDGER_FMT_LOG_LEVEL")
    if env_val:
        parsed = _level_from_name(env_val)
        if parsed is not None:
            return parsed
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Attach one stderr handler to the ``hledger_fmt`` logger; later calls are no-ops.

    ``level`` falls back to ``HLEDGER_FMT_LOG_LEVEL`` and then INFO. ``stream``
    defaults to the current ``sys.stderr``.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)

    # Drop the placeholder added by get_logger.
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(
        logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s %(message)s")
    )

    logger.setLevel(resolved)
    logger.addHandler(handler)
    # Records stop here.
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)``.

    Until ``configure_logging`` runs, the package logger carries a
    ``NullHandler`` so library use stays silent.
    """

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
