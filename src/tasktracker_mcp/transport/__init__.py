"""HTTP transport and outcome classification."""

from tasktracker_mcp.transport.client import TransportClient
from tasktracker_mcp.transport.outcome import OutcomeKind, Request, RequestOutcome

__all__ = [
    "OutcomeKind",
    "Request",
    "RequestOutcome",
    "TransportClient",
]
