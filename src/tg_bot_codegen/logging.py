"""Logging utilities for tg-bot-codegen commands."""

from __future__ import annotations

import logging

_LOGGER_NAME = "tg_bot_codegen"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the tg_bot_codegen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Configure the package logger to write to stderr."""
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked multiple times.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[tg-bot-codegen] %(levelname)s %(message)s"))
    logger.addHandler(handler)

    return logger


__all__ = ["configure_logging", "get_logger"]
