"""Logging utilities for sitegen commands."""

from __future__ import annotations

import logging

_LOGGER_NAME = "sitegen"
_CONSOLE_FORMAT = "[sitegen] %(levelname)s %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the ``sitegen`` hierarchy, e.g. ``sitegen.builder``."""
    return logging.getLogger(f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME)


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Send sitegen records to stderr; debug level when ``verbose``."""
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False

    # Repeated CLI invocations in one process must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)
    return logger


def log_exception(logger: logging.Logger, message: str, exc: BaseException) -> None:
    """Log ``exc`` with a traceback only when debug output is enabled."""
    if logger.isEnabledFor(logging.DEBUG):
        logger.exception("%s: %s", message, exc)
    else:
        logger.error("%s: %s", message, exc)


__all__ = ["configure_logging", "get_logger", "log_exception"]
