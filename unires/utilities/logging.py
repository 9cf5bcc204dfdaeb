"""Logging configuration for unires."""

import logging
import sys
from typing import Literal

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def configure_logging(level: LogLevel = "INFO") -> None:
    """Configure logging for unires."""
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance under the unires namespace."""
    if name != "unires" and not name.startswith("unires."):
        name = f"unires.{name}"
    return logging.getLogger(name)
