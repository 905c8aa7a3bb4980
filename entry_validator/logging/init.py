from __future__ import annotations

import logging
import sys
import threading
from typing import IO

"""Logging initialization with labeled prefixes.

Every line the tool prints goes through the ``entry_validator`` logger and is
prefixed with its label (INFO|WARN|ERROR|SUMMARY). Module loggers are children
of that logger (``logging.getLogger(__name__)``) and propagate to it.

In debug mode, records emitted off the main thread (producer, workers) carry
the thread name after the label: ``DEBUG [entry-worker_3] ...``.
"""

__all__ = [
    "setup_logging",
    "get_logger",
    "log_summary",
    "set_debug",
    "reset_logging",
    "LabeledFormatter",
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
]

LOGGER_NAME = "entry_validator"

# Custom SUMMARY level (between INFO=20 and WARNING=30)
SUMMARY_LEVEL = 25

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """Formatter producing ``LABEL message`` lines.

    Args:
        show_thread: Tag records from non-main threads with ``[thread name]``
    """

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def __init__(self, *, show_thread: bool = False) -> None:
        super().__init__()
        self.show_thread = show_thread

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        if self.show_thread and record.thread != threading.main_thread().ident:
            label = f"{label} [{record.threadName}]"
        message = f"{label} {record.getMessage()}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


def setup_logging(stream: IO[str] | None = None) -> logging.Logger:
    """Configure the application logger (idempotent).

    Args:
        stream: Output stream, stdout by default so the SUMMARY line and
            warnings share one stream

    Returns:
        Configured logger instance for the application
    """
    global _logger

    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.INFO)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setLevel(logging.INFO)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    # Root handlers would print every line twice
    logger.propagate = False

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    if _logger is None:
        return setup_logging()
    return _logger


def set_debug(logger: logging.Logger) -> None:
    """Lower the logger and its handlers to DEBUG and tag worker threads."""
    for h in logger.handlers:
        h.setLevel(logging.DEBUG)
        h.setFormatter(LabeledFormatter(show_thread=True))
    logger.setLevel(logging.DEBUG)


def log_summary(message: str) -> None:
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger so the next setup rebinds the stream (tests)."""
    global _logger
    _logger = None
