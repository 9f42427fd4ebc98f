"""Logging with structured JSON and development formatters."""

from .formatters import DevFormatter, JSONFormatter
from .setup import get_logger, setup_logging, setup_logging_from_settings

__all__ = [
    "setup_logging",
    "setup_logging_from_settings",
    "get_logger",
    "JSONFormatter",
    "DevFormatter",
]
