"""
Pure merge functions for the task list.

Each takes the current list and a confirmed server result and returns a new
list. None of them mutate their input. All preserve uniqueness by ``id``.

Ids are compared by their string form: the backend issues integers, but
callers (MCP clients in particular) may pass ``"7"`` for ``7``.
"""

from __future__ import annotations

from typing import Sequence

from tasktracker_mcp.models import Task


def same_id(a: int | str, b: int | str) -> bool:
    return str(a) == str(b)


def merge_loaded(loaded: Sequence[Task]) -> list[Task]:
    """Adopt the server's list, keeping the first occurrence of any duplicate id."""
    seen: set[str] = set()
    merged: list[Task] = []
    for task in loaded:
        key = str(task.id)
        if key in seen:
            continue
        seen.add(key)
        merged.append(task)
    return merged


def merge_created(tasks: Sequence[Task], created: Task) -> list[Task]:
    """Append a newly created task; an already-known id is replaced in place."""
    if any(same_id(t.id, created.id) for t in tasks):
        return [created if same_id(t.id, created.id) else t for t in tasks]
    return [*tasks, created]


def merge_updated(tasks: Sequence[Task], task_id: int | str, updated: Task) -> list[Task]:
    """
    Replace the task with ``task_id`` by ``updated``, keeping its position.

    Any other element already carrying ``updated.id`` is dropped so the
    list stays unique.
    """
    if not any(same_id(t.id, task_id) for t in tasks):
        return list(tasks)
    merged: list[Task] = []
    for t in tasks:
        if same_id(t.id, task_id):
            merged.append(updated)
        elif not same_id(t.id, updated.id):
            merged.append(t)
    return merged


def merge_deleted(tasks: Sequence[Task], task_id: int | str) -> list[Task]:
    """Remove the task with ``task_id``."""
    return [t for t in tasks if not same_id(t.id, task_id)]
