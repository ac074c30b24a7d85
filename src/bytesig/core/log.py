"""Logging configuration for bytesig.

- One named logger namespace ("bytesig"), stderr output only
- Default WARNING level; BYTESIG_DEBUG in the environment selects DEBUG
- Library loggers get a NullHandler until an application calls setup_logging()
"""

from __future__ import annotations

import logging
import os
import sys

LOGGER_NAME = "bytesig"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: int | str | None = None) -> logging.Logger:
    """Configure the bytesig logger. Safe to call more than once.

    An explicit `level` always wins; otherwise BYTESIG_DEBUG picks DEBUG and
    the default is WARNING.
    """
    logger = logging.getLogger(LOGGER_NAME)

    if level is None:
        level = logging.DEBUG if os.getenv("BYTESIG_DEBUG") else logging.WARNING
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)

    stream_handlers = [h for h in logger.handlers if not isinstance(h, logging.NullHandler)]
    if stream_handlers:
        for handler in stream_handlers:
            handler.setLevel(level)
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a child logger under the bytesig namespace.

    Falls back to a NullHandler when setup_logging() has not been called, so
    importing the library never prints anything.
    """
    if name.startswith(LOGGER_NAME + "."):
        name = name[len(LOGGER_NAME) + 1 :]
    logger = logging.getLogger(f"{LOGGER_NAME}.{name}")
    if not logger.handlers and not logging.getLogger(LOGGER_NAME).handlers:
        logger.addHandler(logging.NullHandler())
    return logger
