"""
# errors.py

Error taxonomy for the stocks API. Every handler raises one of the ApiError
subclasses below; the application's exception handler is the only place
that turns them into a status code and a JSON error body.
"""

from __future__ import annotations

from typing import Optional


class ApiError(Exception):
    """Base class for errors that map onto an HTTP response.

    Attributes:
        status: HTTP status code sent to the client.
        message: text placed under the "Error" key of the response body.
    """

    status: int = 500
    message: str = "Something Bad Happened"

    def __init__(self, message: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(f"{self.status}: {self.message}")

    def to_dict(self) -> dict:
        return {"Error": self.message}


class BadRequest(ApiError):
    """Malformed quantity, unknown symbol, or insufficient holdings."""

    status = 400
    message = "Invalid Request"


class Unauthorized(ApiError):
    """Missing, malformed, or unknown session token."""

    status = 401
    message = "Unknown User"


class NotFound(ApiError):
    """Unknown route or unmatched host."""

    status = 404
    message = "Not Found"


class InternalServerError(ApiError):
    """Encoding or template failure, or an injected fault."""

    status = 500
    message = "Something Bad Happened"


__all__ = [
    'ApiError',
    'BadRequest',
    'Unauthorized',
    'NotFound',
    'InternalServerError',
]
