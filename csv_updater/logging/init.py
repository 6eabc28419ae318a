from __future__ import annotations

import logging
import sys

"""Logging initialization with labeled prefixes.

Console lines are prefixed with INFO|WARN|ERROR|SUMMARY and written to stdout.
Per-row failures additionally go to the JSON Lines error log
(csv_updater.logging.error_log).
"""

__all__ = [
    "setup_logging",
    "get_logger",
    "log_summary",
    "reset_logging",
    "set_debug",
    "LOGGER_NAME",
]

LOGGER_NAME = "csv_record_updater"

# Custom SUMMARY level (between INFO=20 and WARNING=30)
SUMMARY_LEVEL = 25

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """Formatter rendering `LABEL message`."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def format(self, record: logging.LogRecord) -> str:
        level_label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        return f"{level_label} {record.getMessage()}"


def setup_logging() -> logging.Logger:
    """Configure the application logger (idempotent).

    The package loggers (csv_updater.*) share the same stdout handler so that
    service-level warnings such as line lookup misses carry the same labels.

    Returns:
        Configured logger instance for the application
    """
    global _logger

    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.INFO)
    handler.setFormatter(LabeledFormatter())

    logger = logging.getLogger(LOGGER_NAME)
    package_logger = logging.getLogger("csv_updater")
    for lg in (logger, package_logger):
        lg.setLevel(logging.INFO)
        # Clear any existing handlers to avoid duplication
        for h in lg.handlers[:]:
            lg.removeHandler(h)
        lg.addHandler(handler)
        # Prevent propagation to root logger to avoid duplicate output
        lg.propagate = False

    _logger = logger
    return logger


def set_debug(logger: logging.Logger) -> None:
    for lg in (logger, logging.getLogger("csv_updater")):
        for h in lg.handlers:
            h.setLevel(logging.DEBUG)
        lg.setLevel(logging.DEBUG)


def get_logger() -> logging.Logger:
    if _logger is None:
        return setup_logging()
    return _logger


def log_summary(message: str) -> None:
    """Log a message at SUMMARY level."""
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Reset the global logger state. Mainly for testing purposes."""
    global _logger
    _logger = None
