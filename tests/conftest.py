"""
Pytest Configuration and Fixtures for Task Tracker Client Tests.

This module provides fixtures, test data factories and a fake backend for
testing the client without a network.

Architecture:
    - FakeBackend: In-memory emulation of the REST backend, served to
      httpx through ``httpx.MockTransport``; records every request
    - Factories: Generate task payloads and Task models
    - Fixtures: Provide configured clients, stores and transports
    - Markers: Custom pytest markers for test categorization
"""

from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Callable, Union

import httpx
import pytest

from tasktracker_mcp.client import TaskTrackerClient
from tasktracker_mcp.constants import TaskPriority, TaskStatus
from tasktracker_mcp.models import Task
from tasktracker_mcp.session import MemoryTokenStorage, SessionStore
from tasktracker_mcp.transport import TransportClient


BASE_URL = "http://testserver"
TEST_EMAIL = "u@x.com"
TEST_PASSWORD = "abc1234"  # noqa: S105
CREATED_AT = "2024-01-01T00:00:00Z"


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Client-level tests against the fake backend")
    config.addinivalue_line("markers", "session: Session store tests")
    config.addinivalue_line("markers", "transport: Transport classification tests")
    config.addinivalue_line("markers", "auth: Auth flow tests")
    config.addinivalue_line("markers", "tasks: Task store tests")
    config.addinivalue_line("markers", "errors: Error handling tests")
    config.addinivalue_line("markers", "lifecycle: Client lifecycle tests")


# =============================================================================
# ID Generators
# =============================================================================


class IDGenerator:
    """Sequential ID generator for test objects."""

    _counter: int = 0

    @classmethod
    def reset(cls) -> None:
        """Reset counter (call in fixtures)."""
        cls._counter = 0

    @classmethod
    def task_id(cls) -> int:
        """Generate task ID."""
        cls._counter += 1
        return cls._counter


# =============================================================================
# Test Data Factories
# =============================================================================


class TaskFactory:
    """Factory for task payloads (wire format) and Task models."""

    @staticmethod
    def payload(
        id: int | str | None = None,
        title: str = "Test Task",
        description: str | None = "",
        status: TaskStatus | str = TaskStatus.PENDING,
        priority: TaskPriority | str = TaskPriority.MEDIUM,
        created_at: str = CREATED_AT,
        **extra: Any,
    ) -> dict[str, Any]:
        """Create a backend JSON task object with sensible defaults."""
        return {
            "id": id if id is not None else IDGenerator.task_id(),
            "title": title,
            "description": description,
            "status": TaskStatus(status).value,
            "priority": TaskPriority(priority).value,
            "createdAt": created_at,
            **extra,
        }

    @staticmethod
    def create(**kwargs: Any) -> Task:
        """Create a Task model."""
        return Task.from_api(TaskFactory.payload(**kwargs))

    @staticmethod
    def create_completed(**kwargs: Any) -> Task:
        return TaskFactory.create(status=TaskStatus.COMPLETED, **kwargs)

    @staticmethod
    def create_batch(count: int, **kwargs: Any) -> list[Task]:
        """Create multiple tasks."""
        return [TaskFactory.create(title=f"Task {i+1}", **kwargs) for i in range(count)]


# =============================================================================
# Fake Backend
# =============================================================================


Override = Union[httpx.Response, Exception, Callable[[httpx.Request], Any]]


class FakeBackend:
    """
    In-memory emulation of the task tracker REST backend.

    Routes mirror the real server: auth endpoints are public, task endpoints
    require a bearer token the backend issued. Individual routes can be
    overridden with a canned response, an exception to raise (simulating
    transport failures) or a handler callable.
    """

    def __init__(self) -> None:
        self.users: dict[str, dict[str, Any]] = {}
        self.tasks: dict[int, dict[str, Any]] = {}
        self.tokens: dict[str, str] = {}
        self.requests: list[httpx.Request] = []
        self.overrides: dict[tuple[str, str], Override] = {}
        self.delay: float = 0.0
        self._next_task_id = 1
        self._next_user_id = 1

    # -------------------------------------------------------------------------
    # Setup Helpers
    # -------------------------------------------------------------------------

    def add_user(self, username: str = TEST_EMAIL, password: str = TEST_PASSWORD) -> None:
        self.users[username] = {"id": self._next_user_id, "password": password, "email": username}
        self._next_user_id += 1

    def issue_token(self, username: str = TEST_EMAIL, token: str | None = None) -> str:
        token = token or f"T{len(self.tokens) + 1}"
        self.tokens[token] = username
        return token

    def expire_tokens(self) -> None:
        self.tokens.clear()

    def seed_tasks(self, count: int = 3) -> list[dict[str, Any]]:
        seeded = []
        for i in range(count):
            seeded.append(self._store_task({"title": f"Task {i+1}", "description": ""}))
        return seeded

    def respond_with(self, method: str, path: str, override: Override) -> None:
        """Override a route until :meth:`clear_overrides` is called."""
        self.overrides[(method, path)] = override

    def clear_overrides(self) -> None:
        self.overrides.clear()

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    def requests_to(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    # -------------------------------------------------------------------------
    # Request Handling
    # -------------------------------------------------------------------------

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)

        override = self.overrides.get((request.method, request.url.path))
        if override is not None:
            if isinstance(override, Exception):
                raise override
            if isinstance(override, httpx.Response):
                return override
            result = override(request)
            if asyncio.iscoroutine(result):
                result = await result
            return result

        return self._route(request)

    def _route(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        method = request.method

        if path == "/api/auth/test" and method == "GET":
            return httpx.Response(200, json={"message": "Server is running"})
        if path == "/api/auth/signin" and method == "POST":
            return self._sign_in(_body(request))
        if path == "/api/auth/signup" and method == "POST":
            return self._sign_up(_body(request))

        if path.startswith("/api/tasks"):
            auth = request.headers.get("authorization", "")
            if not auth.startswith("Bearer ") or auth[len("Bearer "):] not in self.tokens:
                return httpx.Response(401)
            return self._tasks(method, path, request)

        return httpx.Response(404, json={"message": "Not found"})

    def _sign_in(self, body: dict[str, Any]) -> httpx.Response:
        user = self.users.get(body.get("username", ""))
        if user is None or user["password"] != body.get("password"):
            return httpx.Response(401, json={"message": "Bad credentials"})
        token = self.issue_token(body["username"])
        return httpx.Response(
            200,
            json={
                "accessToken": token,
                "type": "Bearer",
                "id": user["id"],
                "username": body["username"],
                "email": user["email"],
            },
        )

    def _sign_up(self, body: dict[str, Any]) -> httpx.Response:
        if body.get("username") in self.users:
            return httpx.Response(400, json={"message": "Error: Username is already taken!"})
        self.add_user(body["username"], body["password"])
        return httpx.Response(200, json={"message": "User registered successfully!"})

    def _tasks(self, method: str, path: str, request: httpx.Request) -> httpx.Response:
        if path == "/api/tasks":
            if method == "GET":
                return httpx.Response(200, json=list(self.tasks.values()))
            if method == "POST":
                return httpx.Response(200, json=self._store_task(_body(request)))

        task_id = int(path.rsplit("/", 1)[-1])
        if task_id not in self.tasks:
            return httpx.Response(404)
        if method == "PUT":
            self.tasks[task_id].update(_body(request))
            return httpx.Response(200, json=self.tasks[task_id])
        if method == "DELETE":
            del self.tasks[task_id]
            return httpx.Response(200)
        return httpx.Response(405)

    def _store_task(self, body: dict[str, Any]) -> dict[str, Any]:
        task = {
            "id": self._next_task_id,
            "title": body["title"],
            "description": body.get("description", ""),
            "status": body.get("status") or "PENDING",
            "priority": body.get("priority") or "MEDIUM",
            "createdAt": datetime.now(timezone.utc).isoformat(),
        }
        self.tasks[task["id"]] = task
        self._next_task_id += 1
        return dict(task)


def _body(request: httpx.Request) -> dict[str, Any]:
    return json.loads(request.content) if request.content else {}


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def id_generator():
    """Reset and provide ID generator."""
    IDGenerator.reset()
    return IDGenerator


@pytest.fixture
def backend() -> FakeBackend:
    """Create a fresh fake backend with one registered user."""
    fake = FakeBackend()
    fake.add_user()
    return fake


@pytest.fixture
def storage() -> MemoryTokenStorage:
    return MemoryTokenStorage()


@pytest.fixture
def session_store(storage: MemoryTokenStorage) -> SessionStore:
    return SessionStore(storage)


@pytest.fixture
async def http(backend: FakeBackend) -> AsyncIterator[httpx.AsyncClient]:
    """An httpx client wired to the fake backend."""
    async with httpx.AsyncClient(
        base_url=BASE_URL,
        transport=httpx.MockTransport(backend.handler),
    ) as client:
        yield client


@pytest.fixture
def transport(http: httpx.AsyncClient, session_store: SessionStore) -> TransportClient:
    return TransportClient(http, session_store, timeout=0.5)


@pytest.fixture
async def client(backend: FakeBackend, storage: MemoryTokenStorage) -> AsyncIterator[TaskTrackerClient]:
    """A connected TaskTrackerClient talking to the fake backend."""
    client = TaskTrackerClient(
        BASE_URL,
        storage=storage,
        timeout=0.5,
        transport=httpx.MockTransport(backend.handler),
    )
    await client.connect()
    yield client
    await client.disconnect()


@pytest.fixture
async def signed_in_client(client: TaskTrackerClient, backend: FakeBackend) -> TaskTrackerClient:
    """A connected client holding a token the backend accepts."""
    client.session.set(backend.issue_token())
    return client


@pytest.fixture
async def loaded_client(signed_in_client: TaskTrackerClient, backend: FakeBackend) -> TaskTrackerClient:
    """A signed-in client whose task list mirrors three seeded backend tasks."""
    backend.seed_tasks(3)
    result = await signed_in_client.tasks.load()
    assert result.ok
    return signed_in_client


@pytest.fixture
def task_factory() -> type[TaskFactory]:
    """Provide TaskFactory class."""
    return TaskFactory
