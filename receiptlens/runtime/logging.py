"""Centralized logging configuration for receiptlens.

Usage:
    from receiptlens.runtime import get_logger
    logger = get_logger(__name__)

    logger.debug("Detailed debug info")
    logger.info("General info")

Environment variables:
    RECEIPTLENS_LOG_LEVEL: Set log level (DEBUG, INFO, WARNING, ERROR). Default: INFO
"""

import logging
import os
import sys

DEFAULT_LOG_LEVEL = logging.INFO
LOGGER_NAMESPACE = "receiptlens"

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
LOG_FORMAT_DEBUG = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"

_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}

_logging_configured = False


def configure_logging(level: int | None = None) -> None:
    """Configure the receiptlens logger namespace once per process.

    Args:
        level: Log level to use. If None, reads RECEIPTLENS_LOG_LEVEL
               or uses DEFAULT_LOG_LEVEL.
    """
    global _logging_configured

    if _logging_configured:
        return

    if level is None:
        env_level = os.environ.get("RECEIPTLENS_LOG_LEVEL", "").upper()
        level = _LEVEL_MAP.get(env_level, DEFAULT_LOG_LEVEL)

    log_format = LOG_FORMAT_DEBUG if level == logging.DEBUG else LOG_FORMAT

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(log_format))

    root_logger = logging.getLogger(LOGGER_NAMESPACE)
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    root_logger.propagate = False

    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name.

    Module names already inside the package (``receiptlens.runtime.x``) are
    used as-is; anything else is nested under the receiptlens namespace.
    """
    configure_logging()

    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


def set_log_level(level: int) -> None:
    """Change the log level at runtime."""
    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(level)

    for handler in logger.handlers:
        if level == logging.DEBUG:
            handler.setFormatter(logging.Formatter(LOG_FORMAT_DEBUG))
        else:
            handler.setFormatter(logging.Formatter(LOG_FORMAT))


TEXT_PREVIEW_CHARS = 80


def text_preview(text: str, limit: int = TEXT_PREVIEW_CHARS) -> str:
    """Single-line, truncated rendering of recognized text for log messages."""
    flattened = " | ".join(line.strip() for line in text.splitlines() if line.strip())
    if len(flattened) <= limit:
        return flattened
    return flattened[: limit - 3] + "..."


def log_recognized_text(logger: logging.Logger, source: str, text: str) -> None:
    """Log recognized receipt text at DEBUG only; receipts carry personal data."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug("%s: %d characters: %s", source, len(text), text_preview(text))
