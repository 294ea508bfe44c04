# receipt_desk/errors.py
"""
Error taxonomy shared by the storage engine and the HTTP layer.

The storage raises ``ValidationError``; the API raises ``NotFoundError`` when
the storage reports that a record is absent. Exception handlers installed in
``receipt_desk.main`` translate both to status codes.
"""

from typing import Any, Optional


class ReceiptDeskError(Exception):
    """Base class for expected, caller-facing errors."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(ReceiptDeskError):
    """Malformed or out-of-range input. Nothing was changed."""


class NotFoundError(ReceiptDeskError):
    """The referenced record does not exist."""
