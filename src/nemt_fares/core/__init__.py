"""Core utilities for the fare engine."""

from .exceptions import FareEngineError, InvalidInput, UnsupportedConfiguration

__all__ = [
    "FareEngineError",
    "InvalidInput",
    "UnsupportedConfiguration",
]
