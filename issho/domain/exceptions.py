"""
Domain-specific exception hierarchy for the issho availability engine.
"""


class IsshoError(Exception):
    """Base class for all application-level errors."""


class InvalidIntervalError(IsshoError, ValueError):
    """Raised when an availability interval is malformed (end <= start, bad timestamps)."""


class IntervalSourceError(IsshoError):
    """Raised when intervals cannot be fetched from a file or the events API."""
