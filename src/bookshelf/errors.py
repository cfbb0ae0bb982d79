"""Error taxonomy shared by services, dependencies and the API layer.

Services raise these; a single exception handler registered in main.py
turns them into ``{"message": ..., "error": ...}`` JSON responses. Nothing
below the API layer knows about HTTP beyond the status code carried here.
"""

from typing import Optional


class BookshelfError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code: int = 400

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error = error

    def to_body(self) -> dict:
        body = {"message": self.message}
        if self.error:
            body["error"] = self.error
        return body


class Unauthenticated(BookshelfError):
    """Missing, malformed or expired credentials."""

    status_code = 401


class Unauthorized(BookshelfError):
    """Valid identity, but not the owner of the resource."""

    status_code = 403


class NotFound(BookshelfError):
    status_code = 404


class Conflict(BookshelfError):
    """A uniqueness or membership invariant would be violated."""

    status_code = 400


class InvalidCredentials(Conflict):
    """Unknown email or wrong password at login."""


class ValidationError(BookshelfError):
    status_code = 400


class InternalError(BookshelfError):
    status_code = 500


class ConfigError(Exception):
    """Raised at startup when required configuration is missing."""


class InvalidTokenError(Exception):
    """Raised by the token service when a token cannot be trusted.

    Never surfaced to clients directly — the identity dependency turns
    it into Unauthenticated so bad and expired tokens look the same.
    """
