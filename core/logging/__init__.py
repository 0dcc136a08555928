"""
Nawiri Core Logging
====================
Every module logs through a named child of the `nawiri` logger:

    nawiri.ledger       committed mutations, skipped side effects
    nawiri.persistence  blob load/save
    nawiri.events       subscriber registration and dispatch
    nawiri.import       bulk import batches

configure_logging() attaches a single stream handler to the
`nawiri` root. Calling it again only adjusts the level.
"""

from __future__ import annotations

import logging
from typing import Optional, TextIO

ROOT_LOGGER_NAME = "nawiri"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_HANDLER_MARKER = "_nawiri_handler"


def configure_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level.upper())

    for handler in logger.handlers:
        if getattr(handler, _HANDLER_MARKER, False):
            handler.setLevel(level.upper())
            return logger

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.setLevel(level.upper())
    setattr(handler, _HANDLER_MARKER, True)
    logger.addHandler(handler)
    return logger


__all__ = ["ROOT_LOGGER_NAME", "LOG_FORMAT", "configure_logging"]
