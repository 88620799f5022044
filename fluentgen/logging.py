"""Logging utilities for fluentgen commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "fluentgen"
_CONSOLE_FORMAT = "[fluentgen] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s [%(name)s] %(levelname)s %(message)s"

_SEVERITY_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the fluentgen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def severity_level(severity: str) -> int:
    """Map a diagnostic severity (``info``, ``warning`` ...) to a logging level."""
    return _SEVERITY_LEVELS.get(severity.lower(), logging.WARNING)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send fluentgen records to stderr and, optionally, to ``log_file``.

    Calling it again replaces the handlers installed by the previous call.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger", "severity_level"]
