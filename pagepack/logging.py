"""Logging for the pagepack namespace.

One stderr handler lives on the ``pagepack`` logger. Component loggers
(``pagepack.layout``, ``pagepack.offline`` ...) carry no handler or level of
their own and propagate to it, so a single level setting governs them all.
"""

from __future__ import annotations

import logging
import os
import sys

NAMESPACE = "pagepack"
LEVEL_ENV = "PAGEPACK_LOG_LEVEL"


def _resolve_level() -> int:
    raw = os.environ.get(LEVEL_ENV, "").strip().upper()
    level = logging.getLevelName(raw) if raw else logging.INFO
    return level if isinstance(level, int) else logging.INFO


def _namespace_logger() -> logging.Logger:
    logger = logging.getLogger(NAMESPACE)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
        logger.setLevel(_resolve_level())
    return logger


def configure_logging(*, quiet: bool = False, verbose: bool = False) -> logging.Logger:
    """Set the namespace level: verbose wins over quiet, both over PAGEPACK_LOG_LEVEL."""
    logger = _namespace_logger()
    if verbose:
        logger.setLevel(logging.DEBUG)
    elif quiet:
        logger.setLevel(logging.WARNING)
    else:
        logger.setLevel(_resolve_level())
    return logger


def get_logger(name: str) -> logging.Logger:
    _namespace_logger()
    return logging.getLogger(f"{NAMESPACE}.{name}")
