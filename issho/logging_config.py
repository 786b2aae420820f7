"""Application-wide logging configuration."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "issho"
DEFAULT_LOG_LEVEL = logging.WARNING


def configure_logging(level: int | str = DEFAULT_LOG_LEVEL) -> logging.Logger:
    """
    Route the package logger to stderr through rich and return it.

    Calling it again only updates the level.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False

    logging.captureWarnings(True)
    return logger
