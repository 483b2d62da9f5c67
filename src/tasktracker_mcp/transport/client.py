"""
Transport Client.

Issues one HTTP request per call with a bounded timeout and classifies what
happened into a :class:`RequestOutcome`. This is the single place where
status codes, content metadata and transport exceptions are interpreted,
and the only place a 401 invalidates the session.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from tasktracker_mcp.constants import DEFAULT_TIMEOUT, JSON_CONTENT_TYPE, Endpoint
from tasktracker_mcp.session.store import SessionStore
from tasktracker_mcp.transport.outcome import Request, RequestOutcome

logger = logging.getLogger(__name__)


class TransportClient:
    """
    Authenticated, time-bounded request sender.

    The ``httpx.AsyncClient`` is owned by the caller (it carries the base
    URL); this class never closes it.

    Usage:
        async with httpx.AsyncClient(base_url="http://localhost:8080") as http:
            transport = TransportClient(http, SessionStore())
            outcome = await transport.send(Request("GET", "/api/tasks"))
            if outcome.kind == OutcomeKind.DATA:
                ...
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        session: SessionStore,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self._http = http
        self._session = session
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def session(self) -> SessionStore:
        return self._session

    async def send(self, request: Request) -> RequestOutcome:
        """
        Send a request and classify the result.

        Never raises for anything the network or the server does.
        Cancelling the awaiting task cancels the request.
        """
        token = self._session.get()
        if request.requires_auth and token is None:
            logger.debug("No session for %s %s", request.method, request.path)
            return RequestOutcome.no_session()

        sent_token = token if request.requires_auth else None
        headers = self._build_headers(request, sent_token)

        logger.debug("%s %s", request.method, request.path)
        try:
            response = await asyncio.wait_for(
                self._http.request(
                    request.method,
                    request.path,
                    headers=headers,
                    json=request.body,
                ),
                timeout=self._timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.warning(
                "%s %s timed out after %.1fs", request.method, request.path, self._timeout
            )
            return RequestOutcome.timeout(str(e) or None)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", request.method, request.path, e)
            return RequestOutcome.network_error(str(e) or type(e).__name__)

        return self._classify(request, response, sent_token)

    async def probe(self) -> bool:
        """Return True when the backend answers its liveness endpoint."""
        outcome = await self.send(Request("GET", Endpoint.HEALTH, requires_auth=False))
        return outcome.is_success

    # =========================================================================
    # Internals
    # =========================================================================

    @staticmethod
    def _build_headers(request: Request, token: str | None) -> dict[str, str]:
        headers = {"Content-Type": JSON_CONTENT_TYPE}
        if token is not None:
            headers["Authorization"] = f"Bearer {token}"
        headers.update(request.headers)
        return headers

    def _classify(
        self,
        request: Request,
        response: httpx.Response,
        sent_token: str | None,
    ) -> RequestOutcome:
        status = response.status_code

        if status == 401 and sent_token is not None:
            self._session.invalidate(sent_token)
            logger.warning("%s %s rejected the session token", request.method, request.path)
            return RequestOutcome.auth_expired()

        if not response.is_success:
            logger.warning("%s %s returned HTTP %d", request.method, request.path, status)
            return RequestOutcome.http_error(status, _server_message(response))

        # Bodiless successes (e.g. DELETE) are identified by metadata, not by content
        if response.headers.get("content-length") == "0" or not _is_json(response):
            return RequestOutcome.empty(status)

        try:
            payload = response.json()
        except ValueError as e:
            logger.warning("%s %s returned malformed JSON: %s", request.method, request.path, e)
            return RequestOutcome.network_error(f"Malformed JSON response: {e}")

        return RequestOutcome.data(payload, status)


def _is_json(response: httpx.Response) -> bool:
    return JSON_CONTENT_TYPE in response.headers.get("content-type", "")


def _server_message(response: httpx.Response) -> str | None:
    """Extract the backend's ``message`` field from an error body, if any."""
    if not _is_json(response) or not response.content:
        return None
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
    return None
