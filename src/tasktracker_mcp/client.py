"""
Task Tracker Client.

High-level entry point wiring the session store, transport, auth flow and
task store together and owning the HTTP connection.

Architecture:
    TaskTrackerClient
         │
    ┌────┴──────┐
    ▼           ▼
  AuthFlow   TaskStore
    │           │
    └─────┬─────┘
          ▼
    TransportClient ──► SessionStore ──► TokenStorage
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import TypeVar

import httpx

from tasktracker_mcp.auth.flow import AuthFlow
from tasktracker_mcp.constants import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from tasktracker_mcp.exceptions import TaskTrackerConfigurationError
from tasktracker_mcp.models import Session
from tasktracker_mcp.results import Result
from tasktracker_mcp.session.storage import FileTokenStorage, TokenStorage
from tasktracker_mcp.session.store import SessionStore
from tasktracker_mcp.settings import Settings, get_settings
from tasktracker_mcp.tasks.store import TaskStore
from tasktracker_mcp.transport.client import TransportClient

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="TaskTrackerClient")


class TaskTrackerClient:
    """
    Client for the task tracker backend.

    Usage:
        async with TaskTrackerClient.from_settings() as client:
            result = await client.sign_in("u@x.com", "secret1")
            if result.ok:
                await client.tasks.load()
                await client.tasks.create("Buy milk")
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        storage: TokenStorage | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._http_transport = transport
        self._session = SessionStore(storage)

        self._http: httpx.AsyncClient | None = None
        self._transport: TransportClient | None = None
        self._auth: AuthFlow | None = None
        self._tasks: TaskStore | None = None

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> TaskTrackerClient:
        """Build a client from :class:`Settings` with file-backed token storage."""
        settings = settings or get_settings()
        return cls(
            settings.base_url,
            storage=FileTokenStorage(settings.token_file, origin=settings.base_url),
            timeout=settings.request_timeout,
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def connect(self) -> None:
        """Open the HTTP connection pool and build the components."""
        if self._http is not None:
            return
        self._http = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._http_transport,
        )
        self._transport = TransportClient(self._http, self._session, timeout=self._timeout)
        self._auth = AuthFlow(self._transport, self._session)
        self._tasks = TaskStore(self._transport)
        logger.info("Connected to %s", self._base_url)

    async def disconnect(self) -> None:
        """Close the HTTP connection pool. The stored token is kept."""
        if self._http is not None:
            await self._http.aclose()
        self._http = None
        self._transport = None
        self._auth = None
        self._tasks = None

    async def __aenter__(self: T) -> T:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.disconnect()

    def _ensure_connected(self) -> None:
        if self._http is None:
            raise TaskTrackerConfigurationError(
                "Client not connected. Use 'await client.connect()' or async context manager."
            )

    # =========================================================================
    # Components
    # =========================================================================

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def session(self) -> SessionStore:
        return self._session

    @property
    def auth(self) -> AuthFlow:
        self._ensure_connected()
        return self._auth  # type: ignore[return-value]

    @property
    def tasks(self) -> TaskStore:
        self._ensure_connected()
        return self._tasks  # type: ignore[return-value]

    @property
    def is_authenticated(self) -> bool:
        """True while a token is held; flips to False as soon as a 401 is seen."""
        return self._session.is_authenticated

    # =========================================================================
    # Convenience
    # =========================================================================

    async def check_server(self) -> bool:
        """Probe the backend's liveness endpoint."""
        self._ensure_connected()
        return await self._transport.probe()  # type: ignore[union-attr]

    async def sign_in(self, identifier: str, secret: str) -> Result[Session]:
        """Sign in; the previous user's cached tasks are dropped on success."""
        result = await self.auth.sign_in(identifier, secret)
        if result.ok:
            self.tasks.reset()
        return result

    async def sign_up(self, identifier: str, secret: str, confirm_secret: str) -> Result[None]:
        return await self.auth.sign_up(identifier, secret, confirm_secret)

    def sign_out(self) -> None:
        """Forget the token and every piece of task state."""
        self.auth.sign_out()
        self.tasks.reset()
