"""Logging configuration helpers for iiifdims."""

from __future__ import annotations

import logging
import os
from typing import Final


_DEFAULT_FORMAT: Final[str] = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DEFAULT_DATEFMT: Final[str] = "%Y-%m-%d %H:%M:%S"

# Chatty third-party loggers that only matter when debugging.
_NOISY_LOGGERS: Final[tuple[str, ...]] = ("httpx", "httpcore", "aiosqlite")


def _resolve_level(level_name: str) -> int:
    value = level_name.strip()
    if value.isdigit():
        return int(value)

    numeric = getattr(logging, value.upper(), None)
    if isinstance(numeric, int):
        return numeric

    return logging.INFO


def _attach_console(logger: logging.Logger, level: int) -> None:
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT, _DEFAULT_DATEFMT))
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


def configure_logging(*, debug: bool = False) -> None:
    """Stream the iiifdims logger tree to the console.

    ``LOG_LEVEL`` wins over ``debug``. Request lines go to
    ``iiifdims.access`` and are never filtered below INFO.
    """

    env_level = os.getenv("LOG_LEVEL")
    level = _resolve_level(env_level or ("DEBUG" if debug else "INFO"))

    _attach_console(logging.getLogger("iiifdims"), level)
    logging.getLogger("iiifdims.access").setLevel(max(level, logging.INFO))

    library_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
