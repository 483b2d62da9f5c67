"""
Client Error Values.

The closed set of failure categories surfaced by the auth flow and the task
store. These are values, not exceptions: expected conditions such as a
missing session, an expired token or a timeout are returned to the caller
inside a :class:`~tasktracker_mcp.results.Result`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    """Semantic category of a client-side failure."""

    # Pre-flight validation (local, no I/O)
    MISSING_FIELDS = "missing_fields"
    PASSWORD_MISMATCH = "password_mismatch"
    PASSWORD_TOO_SHORT = "password_too_short"

    # Session
    NO_SESSION = "no_session"
    AUTH_EXPIRED = "auth_expired"

    # Transport
    HTTP_ERROR = "http_error"
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"


DEFAULT_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.MISSING_FIELDS: "Please fill in all fields.",
    ErrorKind.PASSWORD_MISMATCH: "Passwords do not match.",
    ErrorKind.PASSWORD_TOO_SHORT: "Password is too short.",
    ErrorKind.NO_SESSION: "Please sign in first.",
    ErrorKind.AUTH_EXPIRED: "Session expired. Please sign in again.",
    ErrorKind.HTTP_ERROR: "The server rejected the request.",
    ErrorKind.NETWORK_ERROR: "Cannot connect to the server.",
    ErrorKind.TIMEOUT: "Request timed out.",
}


@dataclass(frozen=True, slots=True)
class ClientError:
    """
    A categorized failure.

    Attributes:
        kind: Failure category
        message: Human-readable cause (server-reported when available)
        status: HTTP status for ``HTTP_ERROR``, otherwise None
    """

    kind: ErrorKind
    message: str
    status: int | None = None

    @classmethod
    def of(cls, kind: ErrorKind, message: str | None = None, status: int | None = None) -> ClientError:
        """Build an error, falling back to the category's generic message."""
        return cls(kind=kind, message=message or DEFAULT_MESSAGES[kind], status=status)

    def __str__(self) -> str:
        if self.status is not None:
            return f"{self.message} (HTTP {self.status})"
        return self.message
