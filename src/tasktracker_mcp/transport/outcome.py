"""
Request and outcome values for the transport layer.

``RequestOutcome`` is the only thing the transport hands back to its
callers. Callers switch on ``kind`` and never look at status codes or
exceptions themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from tasktracker_mcp.errors import ClientError, ErrorKind


@dataclass(frozen=True, slots=True)
class Request:
    """A single logical HTTP request against the backend."""

    method: str
    path: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None
    requires_auth: bool = True


class OutcomeKind(str, Enum):
    """Classification of a finished request."""

    DATA = "data"
    EMPTY = "empty"
    AUTH_EXPIRED = "auth_expired"
    HTTP_ERROR = "http_error"
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    NO_SESSION = "no_session"


_ERROR_KINDS: dict[OutcomeKind, ErrorKind] = {
    OutcomeKind.AUTH_EXPIRED: ErrorKind.AUTH_EXPIRED,
    OutcomeKind.HTTP_ERROR: ErrorKind.HTTP_ERROR,
    OutcomeKind.NETWORK_ERROR: ErrorKind.NETWORK_ERROR,
    OutcomeKind.TIMEOUT: ErrorKind.TIMEOUT,
    OutcomeKind.NO_SESSION: ErrorKind.NO_SESSION,
}


@dataclass(frozen=True, slots=True)
class RequestOutcome:
    """
    Tagged result of :meth:`TransportClient.send`.

    Attributes:
        kind: Outcome category
        payload: Parsed JSON body (``DATA`` only)
        status: HTTP status when a response was received
        message: Server-reported message (``HTTP_ERROR``) or diagnostic
            detail (``NETWORK_ERROR``, ``TIMEOUT``)
    """

    kind: OutcomeKind
    payload: Any = None
    status: int | None = None
    message: str | None = None

    # =========================================================================
    # Constructors
    # =========================================================================

    @classmethod
    def data(cls, payload: Any, status: int = 200) -> RequestOutcome:
        return cls(OutcomeKind.DATA, payload=payload, status=status)

    @classmethod
    def empty(cls, status: int = 200) -> RequestOutcome:
        return cls(OutcomeKind.EMPTY, status=status)

    @classmethod
    def auth_expired(cls) -> RequestOutcome:
        return cls(OutcomeKind.AUTH_EXPIRED, status=401)

    @classmethod
    def http_error(cls, status: int, message: str | None = None) -> RequestOutcome:
        return cls(OutcomeKind.HTTP_ERROR, status=status, message=message)

    @classmethod
    def network_error(cls, detail: str | None = None) -> RequestOutcome:
        return cls(OutcomeKind.NETWORK_ERROR, message=detail)

    @classmethod
    def timeout(cls, detail: str | None = None) -> RequestOutcome:
        return cls(OutcomeKind.TIMEOUT, message=detail)

    @classmethod
    def no_session(cls) -> RequestOutcome:
        return cls(OutcomeKind.NO_SESSION)

    # =========================================================================
    # Inspection
    # =========================================================================

    @property
    def is_success(self) -> bool:
        return self.kind in (OutcomeKind.DATA, OutcomeKind.EMPTY)

    def to_error(self) -> ClientError:
        """Translate a failure outcome into a :class:`ClientError`."""
        if self.is_success:
            raise ValueError(f"{self.kind.value} outcome is not a failure")
        kind = _ERROR_KINDS[self.kind]
        if kind == ErrorKind.HTTP_ERROR:
            return ClientError.of(kind, self.message, status=self.status)
        # Diagnostic details are for logs, not for the user
        return ClientError.of(kind)
