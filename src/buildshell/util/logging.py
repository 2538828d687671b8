"""Logging utilities for buildshell."""

from __future__ import annotations

import logging
from typing import Final

DEFAULT_LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_LEVELS: Final[dict[str, int]] = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


def configure_logging(level: str = "INFO", fmt: str | None = None) -> None:
    """Configure logging for build scripts and the CLI.

    Args:
        level: Logging level name (e.g., "INFO", "DEBUG"). Unknown names fall
            back to INFO.
        fmt: Optional logging format string.
    """

    numeric_level = normalize_level(level)
    logging.basicConfig(level=numeric_level, format=fmt or DEFAULT_LOG_FORMAT)
    # basicConfig is a no-op once handlers exist; the level still applies
    logging.getLogger().setLevel(numeric_level)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module or component."""

    return logging.getLogger(name)


def normalize_level(level: str) -> int:
    """Translate a level name into a ``logging`` level number."""

    return _LEVELS.get(level.strip().upper(), logging.INFO)
