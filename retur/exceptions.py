"""
Retur Module - Errors raised by the store

Views translate these into HTTP responses:
    InvalidInput → 400
    NotFound     → 404
    StorageError → 500 (generic message, details only in the log)
"""


class ReturError(Exception):
    """Base class for retur store errors."""

    default_message = 'Retur error'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(ReturError):
    default_message = 'Invalid input'


class NotFound(ReturError):
    default_message = 'Return not found'


class StorageError(ReturError):
    default_message = 'Storage unavailable'
