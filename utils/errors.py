"""
utils/errors.py
---------------
Application error taxonomy.
Each error carries the HTTP-equivalent status a web layer should answer with.
"""


class AppError(Exception):
    """Base class for all errors raised by the data layer."""

    status = 500

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status

    def __str__(self) -> str:
        return self.message


class BadRequestError(AppError):
    """The caller sent something we can't act on (400)."""

    status = 400


class NotFoundError(AppError):
    """The requested row doesn't exist (404)."""

    status = 404


class EmptyPayloadError(BadRequestError):
    """A partial update was requested with nothing to update."""


class InvalidRangeError(BadRequestError):
    """A minimum filter bound is greater than its maximum bound."""


class UnknownFilterError(BadRequestError):
    """A filter key isn't recognized by the resource (strict mode only)."""
