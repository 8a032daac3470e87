"""
Logging configuration.

The library modules only call ``logging.getLogger(__name__)``; handlers are
installed by ``setup_logging``, which the CLI calls on start-up.
"""
from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Optional


class StructuredFormatter(logging.Formatter):
    """Single-line formatter: timestamp, level, logger name, message."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
        "RESET": "\033[0m",
    }

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        message = f"[{timestamp}] {record.levelname:8} [{record.name}] {record.getMessage()}"
        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"
        if not self.use_color:
            return message
        color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        return f"{color}{message}{self.COLORS['RESET']}"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure the ``clinscore`` logger hierarchy.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for plain-text log output
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")

    logger = logging.getLogger("clinscore")
    logger.setLevel(numeric)
    logger.handlers.clear()
    logger.propagate = False

    # stderr keeps stdout clean for JSON output
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(StructuredFormatter(use_color=sys.stderr.isatty()))
    logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
        ))
        logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Module name (typically __name__)
    """
    return logging.getLogger(name)
