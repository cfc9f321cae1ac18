"""Logging setup for the Solid Number engine.

Every engine module logs under the ``blaze_solid`` namespace
(``blaze_solid.arithmetic``, ``blaze_solid.gggx``, ...). Arithmetic dispatch,
undefined creation and GGGX phases log at DEBUG; pool exhaustion logs at
WARNING. Nothing is emitted until ``setup_logging`` attaches a handler.
"""

import logging
import sys
from datetime import datetime
from typing import Optional


class StructuredFormatter(logging.Formatter):
    """One line per record: ISO timestamp, level, engine logger name, message."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).isoformat()
        return f"{timestamp} [{record.levelname}] {record.name}: {record.getMessage()}"


def setup_logging(
    level: str = "INFO", log_file: Optional[str] = None
) -> logging.Logger:
    """Attach handlers to the ``blaze_solid`` logger.

    Args:
        level: Logging level (DEBUG shows per-operation traces of the engine)
        log_file: Optional file path to write logs (if None, logs to stderr)

    Returns:
        The ``blaze_solid`` root logger
    """
    logger = logging.getLogger("blaze_solid")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Calling again (e.g. from the CLI and then tests) replaces the handlers
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(StructuredFormatter())
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "blaze_solid") -> logging.Logger:
    """Logger for one engine module, e.g. get_logger("pool") -> blaze_solid.pool."""
    return logging.getLogger(f"blaze_solid.{name}")
