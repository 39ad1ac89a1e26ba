"""Logging setup shared by the API and the CLI scripts."""
from __future__ import annotations

import logging

LOGGER_NAME = "pgcdt"
_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach a single stream handler to the package logger (idempotent)."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if not any(getattr(h, "_pgcdt_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._pgcdt_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
