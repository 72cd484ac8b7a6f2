"""
Exception taxonomy for the books API.

Each exception carries the HTTP status it maps to; the application registers
a single handler that renders them as ``ErrorResponse`` envelopes.
"""

from typing import Optional


class BookAPIError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class BookValidationError(BookAPIError):
    """Malformed identifier or request body."""

    status_code = 400


class BookNotFoundError(BookAPIError):
    """Well-formed identifier that matches no document."""

    status_code = 404


class StoreFaultError(BookAPIError):
    """Any failure raised by the database driver."""

    status_code = 500
