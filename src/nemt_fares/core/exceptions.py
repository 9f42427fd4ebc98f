"""Exception hierarchy for the fare engine."""

from typing import Any


class FareEngineError(Exception):
    """Base class for every error raised by the fare engine."""


class InvalidInput(FareEngineError, ValueError):
    """A pricing request (or invoice input) that can never be priced as given.

    Callers must fix the input before retrying.
    """

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []


class UnsupportedConfiguration(FareEngineError):
    """Pricing configuration is missing required fields or is inconsistent.

    Raised when the configuration is built, not per request.
    """

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []
