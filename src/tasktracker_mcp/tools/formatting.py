"""
Response Formatting for Task Tracker MCP Tools.

Renders tasks, drafts and client state as Markdown or JSON-ready dicts.
"""

from __future__ import annotations

from typing import Any, Sequence

from tasktracker_mcp.constants import TaskStatus
from tasktracker_mcp.errors import ClientError, ErrorKind
from tasktracker_mcp.models import Task, TaskDraft

_STATUS_ICONS = {
    TaskStatus.PENDING: "[ ]",
    TaskStatus.IN_PROGRESS: "[~]",
    TaskStatus.COMPLETED: "[x]",
}


# =============================================================================
# Tasks
# =============================================================================


def format_task_markdown(task: Task) -> str:
    """Format a single task as Markdown."""
    lines = [
        f"## {_STATUS_ICONS[task.status]} {task.title}",
        "",
        f"- **ID**: `{task.id}`",
        f"- **Status**: {task.status.value}",
        f"- **Priority**: {task.priority.value}",
        f"- **Created**: {task.created_at.date().isoformat()}",
    ]
    if task.due_date:
        lines.append(f"- **Due**: {task.due_date.date().isoformat()}")
    if task.description:
        lines.extend(["", task.description])
    return "\n".join(lines)


def format_task_json(task: Task) -> dict[str, Any]:
    """Format a single task as a JSON-compatible dict (wire field names)."""
    return task.model_dump(mode="json", by_alias=True, exclude_none=True)


def format_tasks_markdown(tasks: Sequence[Task], title: str = "Tasks") -> str:
    """Format a task list as Markdown."""
    if not tasks:
        return f"# {title}\n\nNo tasks yet."
    lines = [f"# {title} ({len(tasks)})", ""]
    for task in tasks:
        line = f"- {_STATUS_ICONS[task.status]} **{task.title}** `{task.id}` ({task.priority.value})"
        if task.description:
            line += f": {task.description}"
        lines.append(line)
    return "\n".join(lines)


def format_tasks_json(tasks: Sequence[Task]) -> dict[str, Any]:
    """Format a task list as a JSON-compatible dict."""
    return {
        "count": len(tasks),
        "tasks": [format_task_json(t) for t in tasks],
    }


# =============================================================================
# Drafts & State
# =============================================================================


def format_draft_markdown(draft: TaskDraft) -> str:
    """Format an edit draft as Markdown."""
    lines = [
        f"# Editing Task `{draft.task_id}`",
        "",
        f"- **Title**: {draft.title}",
        f"- **Priority**: {draft.priority.value}",
    ]
    if draft.description:
        lines.append(f"- **Description**: {draft.description}")
    return "\n".join(lines)


def format_draft_json(draft: TaskDraft) -> dict[str, Any]:
    return draft.model_dump(mode="json")


def format_state_json(
    *,
    authenticated: bool,
    tasks: Sequence[Task],
    busy: bool,
    last_error: ClientError | None,
    draft: TaskDraft | None,
) -> dict[str, Any]:
    """Snapshot of everything a view would render; a signed-out user sees no tasks."""
    if not authenticated:
        tasks = []
        draft = None
    return {
        "authenticated": authenticated,
        "busy": busy,
        "last_error": format_error_json(last_error) if last_error else None,
        "draft": format_draft_json(draft) if draft else None,
        **format_tasks_json(tasks),
    }


def format_state_markdown(
    *,
    authenticated: bool,
    tasks: Sequence[Task],
    busy: bool,
    last_error: ClientError | None,
    draft: TaskDraft | None,
) -> str:
    if not authenticated:
        return "# Signed Out\n\nSign in to see your tasks."
    parts = []
    if last_error:
        parts.append(f"> Warning: {last_error}")
    if busy:
        parts.append("_Working..._")
    parts.append(format_tasks_markdown(tasks))
    if draft:
        parts.append(format_draft_markdown(draft))
    return "\n\n".join(parts)


# =============================================================================
# Messages
# =============================================================================


_SUGGESTIONS: dict[ErrorKind, str] = {
    ErrorKind.NO_SESSION: "Sign in with tasktracker_sign_in first.",
    ErrorKind.AUTH_EXPIRED: "Sign in again with tasktracker_sign_in.",
    ErrorKind.NETWORK_ERROR: "Check that the backend server is running and reachable.",
    ErrorKind.TIMEOUT: "Check that the backend server is running and try again.",
}


def format_error_json(error: ClientError) -> dict[str, Any]:
    return {"kind": error.kind.value, "message": error.message, "status": error.status}


def success_message(message: str) -> str:
    return f"Success: {message}"


def error_message(message: str, suggestion: str | None = None) -> str:
    """Format an error with an optional hint on how to recover."""
    text = f"Error: {message}"
    if suggestion:
        text += f"\n\nSuggestion: {suggestion}"
    return text


def client_error_message(error: ClientError) -> str:
    """Format a :class:`ClientError` with a category-specific hint."""
    return error_message(str(error), _SUGGESTIONS.get(error.kind))
