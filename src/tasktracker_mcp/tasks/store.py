"""
Task Store.

Owns the signed-in user's task list. Every operation is one transport round
trip followed by a pure merge (see :mod:`tasktracker_mcp.tasks.merge`)
applied only when the server confirmed the change. Failures are recorded in
``last_error`` and leave the list untouched.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from tasktracker_mcp.constants import Endpoint, TaskPriority, TaskStatus
from tasktracker_mcp.errors import ClientError, ErrorKind
from tasktracker_mcp.models import Task, TaskDraft
from tasktracker_mcp.results import Result
from tasktracker_mcp.tasks.merge import merge_created, merge_deleted, merge_loaded, merge_updated, same_id
from tasktracker_mcp.transport.client import TransportClient
from tasktracker_mcp.transport.outcome import OutcomeKind, Request, RequestOutcome

logger = logging.getLogger(__name__)


class TaskStore:
    """
    In-memory task list kept in step with the backend.

    Concurrent operations are not serialized. ``busy`` reports whether any
    operation is in flight.

    Usage:
        store = TaskStore(transport)
        await store.load()
        result = await store.create("Buy milk")
        if result.ok:
            await store.toggle_complete(result.value.id)
    """

    def __init__(self, transport: TransportClient) -> None:
        self._transport = transport
        self._tasks: list[Task] = []
        self._in_flight = 0
        self._last_error: ClientError | None = None
        self._draft: TaskDraft | None = None

    # =========================================================================
    # State
    # =========================================================================

    @property
    def tasks(self) -> list[Task]:
        """Snapshot of the current list."""
        return list(self._tasks)

    @property
    def busy(self) -> bool:
        return self._in_flight > 0

    @property
    def last_error(self) -> ClientError | None:
        return self._last_error

    @property
    def draft(self) -> TaskDraft | None:
        return self._draft

    def get(self, task_id: int | str) -> Task | None:
        """Return the cached task with ``task_id``, if any. ``7`` and ``"7"`` match."""
        return next((t for t in self._tasks if same_id(t.id, task_id)), None)

    def dismiss_error(self) -> None:
        # Starting any operation also clears the error (see _send), so an
        # undismissed error does not outlive the next attempt.
        self._last_error = None

    def reset(self) -> None:
        """Drop all local state (used on sign-out)."""
        self._tasks = []
        self._last_error = None
        self._draft = None

    # =========================================================================
    # Operations
    # =========================================================================

    async def load(self) -> Result[list[Task]]:
        """Replace the list with the server's."""
        outcome = await self._send(Request("GET", Endpoint.TASKS))

        if outcome.kind == OutcomeKind.EMPTY:
            self._tasks = []
            return Result.success([])
        if outcome.kind != OutcomeKind.DATA:
            return self._fail(outcome.to_error(), "load")

        if not isinstance(outcome.payload, list):
            return self._fail(_malformed("Expected a list of tasks."), "load")
        try:
            loaded = Task.list_from_api(outcome.payload)
        except ValidationError as e:
            logger.warning("Task list failed validation: %s", e)
            return self._fail(_malformed("Task list was malformed."), "load")

        self._tasks = merge_loaded(loaded)
        logger.debug("Loaded %d tasks", len(self._tasks))
        return Result.success(self.tasks)

    async def create(
        self,
        title: str,
        description: str = "",
        priority: TaskPriority = TaskPriority.MEDIUM,
    ) -> Result[Task]:
        """Create a task; a blank title is a no-op."""
        if not title or not title.strip():
            return Result.skip()

        outcome = await self._send(
            Request(
                "POST",
                Endpoint.TASKS,
                body={
                    "title": title,
                    "description": description or "",
                    "status": TaskStatus.PENDING.value,
                    "priority": TaskPriority(priority).value,
                },
            )
        )

        task_or_error = self._task_from(outcome, "create")
        if isinstance(task_or_error, ClientError):
            return self._fail(task_or_error, "create")

        self._tasks = merge_created(self._tasks, task_or_error)
        logger.info("Created task %s", task_or_error.id)
        return Result.success(task_or_error)

    async def update(
        self,
        task_id: int | str,
        *,
        title: str | None = None,
        description: str | None = None,
        priority: TaskPriority | None = None,
        status: TaskStatus | None = None,
    ) -> Result[Task]:
        """
        Update a cached task.

        Fields left as None are echoed back unchanged. Unknown ids and blank
        titles are no-ops.
        """
        current = self.get(task_id)
        if current is None:
            return Result.skip()
        if title is not None and not title.strip():
            return Result.skip()

        body = current.to_update_body(
            title=title,
            description=description,
            priority=TaskPriority(priority) if priority is not None else None,
            status=TaskStatus(status) if status is not None else None,
        )
        outcome = await self._send(Request("PUT", Endpoint.task(current.id), body=body))

        task_or_error = self._task_from(outcome, "update")
        if isinstance(task_or_error, ClientError):
            return self._fail(task_or_error, "update")

        self._tasks = merge_updated(self._tasks, current.id, task_or_error)
        logger.info("Updated task %s", task_id)
        return Result.success(task_or_error)

    async def delete(self, task_id: int | str) -> Result[None]:
        """Delete a cached task. Both a body and an empty 2xx count as success."""
        if self.get(task_id) is None:
            return Result.skip()

        outcome = await self._send(Request("DELETE", Endpoint.task(task_id)))
        if not outcome.is_success:
            return self._fail(outcome.to_error(), "delete")

        self._tasks = merge_deleted(self._tasks, task_id)
        logger.info("Deleted task %s", task_id)
        return Result.success()

    async def toggle_complete(self, task_id: int | str) -> Result[Task]:
        """Flip a task between completed and pending."""
        current = self.get(task_id)
        if current is None:
            return Result.skip()
        return await self.update(task_id, status=current.status.toggled())

    # =========================================================================
    # Edit Draft
    # =========================================================================

    def start_edit(self, task_id: int | str) -> TaskDraft | None:
        """Open an edit buffer seeded from the cached task."""
        task = self.get(task_id)
        if task is None:
            return None
        self._draft = TaskDraft.from_task(task)
        return self._draft

    def edit_draft(
        self,
        *,
        title: str | None = None,
        description: str | None = None,
        priority: TaskPriority | None = None,
    ) -> TaskDraft | None:
        """Change fields of the open draft. Has no network effect."""
        if self._draft is None:
            return None
        if title is not None:
            self._draft.title = title
        if description is not None:
            self._draft.description = description
        if priority is not None:
            self._draft.priority = priority
        return self._draft

    def cancel_edit(self) -> None:
        self._draft = None

    async def save_edit(self) -> Result[Task]:
        """
        Commit the open draft through :meth:`update`.

        The draft is discarded on success and kept on failure so the user
        can retry.
        """
        draft = self._draft
        if draft is None or not draft.title.strip():
            return Result.skip()

        result = await self.update(
            draft.task_id,
            title=draft.title,
            description=draft.description,
            priority=draft.priority,
        )
        if result.ok and self._draft is draft:
            self._draft = None
        return result

    # =========================================================================
    # Internals
    # =========================================================================

    async def _send(self, request: Request) -> RequestOutcome:
        self._last_error = None
        self._in_flight += 1
        try:
            return await self._transport.send(request)
        finally:
            self._in_flight -= 1

    def _fail(self, error: ClientError, operation: str) -> Result[Any]:
        logger.warning("Task %s failed: %s", operation, error)
        self._last_error = error
        return Result.failure(error)

    @staticmethod
    def _task_from(outcome: RequestOutcome, operation: str) -> Task | ClientError:
        """Extract the single task a create/update must return."""
        if outcome.kind == OutcomeKind.EMPTY:
            return _malformed(f"The server returned no task for {operation}.")
        if outcome.kind != OutcomeKind.DATA:
            return outcome.to_error()
        if not isinstance(outcome.payload, dict):
            return _malformed("Expected a task object.")
        try:
            return Task.from_api(outcome.payload)
        except ValidationError as e:
            logger.warning("Task payload failed validation: %s", e)
            return _malformed("Task was malformed.")


def _malformed(message: str) -> ClientError:
    return ClientError.of(ErrorKind.NETWORK_ERROR, message)
