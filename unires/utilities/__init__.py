"""Utility functions and helpers for unires."""

from .logging import LogLevel, configure_logging, get_logger

__all__ = [
    "LogLevel",
    "configure_logging",
    "get_logger",
]
