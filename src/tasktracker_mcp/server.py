#!/usr/bin/env python3
"""
Task Tracker MCP Server.

This server exposes the task tracker client as MCP tools: it forwards
sign-in, sign-up and task intents to the client and renders whatever state
the client holds.

Features:
    - Authentication (sign in, sign up, sign out, server check)
    - Task management (list, create, update, toggle, delete)
    - Edit drafts (start, save, cancel)
    - Client state (snapshot, dismiss last error)

Environment Variables:
    TASKTRACKER_BASE_URL
    TASKTRACKER_REQUEST_TIMEOUT
    TASKTRACKER_TOKEN_FILE
    TASKTRACKER_LOG_LEVEL
"""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from mcp.server.fastmcp import FastMCP, Context

from tasktracker_mcp.client import TaskTrackerClient
from tasktracker_mcp.models import Task
from tasktracker_mcp.results import Result
from tasktracker_mcp.settings import get_settings
from tasktracker_mcp.tools.inputs import (
    ResponseFormat,
    SignInInput,
    SignUpInput,
    TaskListInput,
    TaskCreateInput,
    TaskUpdateInput,
    TaskIdInput,
    DraftSaveInput,
)
from tasktracker_mcp.tools.formatting import (
    client_error_message,
    error_message,
    format_draft_json,
    format_draft_markdown,
    format_state_json,
    format_state_markdown,
    format_task_json,
    format_task_markdown,
    format_tasks_json,
    format_tasks_markdown,
    success_message,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan Management
# =============================================================================


@asynccontextmanager
async def lifespan(mcp: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """
    Manage the task tracker client lifecycle.

    Connects the client on startup and closes it on shutdown.
    """
    logger.info("Initializing Task Tracker MCP Server...")

    client = TaskTrackerClient.from_settings()
    await client.connect()
    logger.info("Task tracker client connected to %s", client.base_url)
    try:
        yield {"client": client}
    finally:
        await client.disconnect()
        logger.info("Task tracker client disconnected")


# Initialize FastMCP server
mcp = FastMCP(
    "tasktracker_mcp",
    lifespan=lifespan,
)


def get_client(ctx: Context) -> TaskTrackerClient:
    """Get the task tracker client from context."""
    return ctx.request_context.lifespan_context["client"]


# =============================================================================
# Error Handling
# =============================================================================


def handle_error(e: Exception, operation: str) -> str:
    """Handle unexpected exceptions and return a user-friendly error message."""
    logger.exception("Error in %s: %s", operation, e)

    if "Configuration" in type(e).__name__:
        return error_message(
            f"Configuration error: {e}",
            "Check your TASKTRACKER_* environment variables.",
        )
    return error_message(f"Unexpected error: {e}")


def render_task_result(result: Result[Task], heading: str, response_format: ResponseFormat) -> str:
    """Render the result of a single-task operation."""
    if result.skipped:
        return error_message("Nothing to do.", "Check the task ID and that the title is not blank.")
    if result.error:
        return client_error_message(result.error)

    task = result.value
    if response_format == ResponseFormat.MARKDOWN:
        return f"# {heading}\n\n{format_task_markdown(task)}"
    return json.dumps({"success": True, "task": format_task_json(task)}, indent=2)


# =============================================================================
# Auth Tools
# =============================================================================


@mcp.tool(
    name="tasktracker_check_server",
    annotations={
        "title": "Check Server",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def tasktracker_check_server(ctx: Context) -> str:
    """
    Check whether the task tracker backend is reachable.

    Returns:
        Whether the server answered its liveness endpoint.
    """
    try:
        client = get_client(ctx)
        if await client.check_server():
            return success_message(f"Server at {client.base_url} is online.")
        return error_message(
            f"Server at {client.base_url} is not reachable.",
            "Start the backend server and try again.",
        )
    except Exception as e:
        return handle_error(e, "check_server")


@mcp.tool(
    name="tasktracker_sign_in",
    annotations={
        "title": "Sign In",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def tasktracker_sign_in(params: SignInInput, ctx: Context) -> str:
    """
    Sign in to the task tracker.

    The session token is persisted, so later server restarts stay signed in
    until the token expires.

    Args:
        params: Credentials:
            - email (str): Account email
            - password (str): Account password

    Returns:
        Confirmation on success, or the reason sign-in failed.
    """
    try:
        client = get_client(ctx)
        result = await client.sign_in(params.email, params.password)
        if result.error:
            return client_error_message(result.error)
        return success_message(f"Signed in as {result.value.username or params.email}.")
    except Exception as e:
        return handle_error(e, "sign_in")


@mcp.tool(
    name="tasktracker_sign_up",
    annotations={
        "title": "Sign Up",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def tasktracker_sign_up(params: SignUpInput, ctx: Context) -> str:
    """
    Register a new account.

    Registration does not sign in; call tasktracker_sign_in afterwards.

    Args:
        params: Registration data:
            - email (str): Email, also used as username
            - password (str): At least 6 characters
            - confirm_password (str): Must match password

    Returns:
        Confirmation on success, or the reason registration failed.
    """
    try:
        client = get_client(ctx)
        result = await client.sign_up(params.email, params.password, params.confirm_password)
        if result.error:
            return client_error_message(result.error)
        return success_message("Registration successful! Please sign in with your credentials.")
    except Exception as e:
        return handle_error(e, "sign_up")


@mcp.tool(
    name="tasktracker_sign_out",
    annotations={
        "title": "Sign Out",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
async def tasktracker_sign_out(ctx: Context) -> str:
    """Sign out and forget all local task state."""
    try:
        get_client(ctx).sign_out()
        return success_message("Signed out.")
    except Exception as e:
        return handle_error(e, "sign_out")


# =============================================================================
# Task Tools
# =============================================================================


@mcp.tool(
    name="tasktracker_list_tasks",
    annotations={
        "title": "List Tasks",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def tasktracker_list_tasks(params: TaskListInput, ctx: Context) -> str:
    """
    Reload and list the signed-in user's tasks.

    Args:
        params: Query parameters:
            - status (str): Optional status filter
            - response_format (str): 'markdown' or 'json'

    Returns:
        The task list, or the reason it could not be loaded.
    """
    try:
        client = get_client(ctx)
        result = await client.tasks.load()
        if result.error:
            return client_error_message(result.error)

        tasks = result.value
        title = "Tasks"
        if params.status:
            tasks = [t for t in tasks if t.status == params.status]
            title = f"{params.status.value} Tasks"

        if params.response_format == ResponseFormat.MARKDOWN:
            return format_tasks_markdown(tasks, title=title)
        return json.dumps(format_tasks_json(tasks), indent=2)
    except Exception as e:
        return handle_error(e, "list_tasks")


@mcp.tool(
    name="tasktracker_create_task",
    annotations={
        "title": "Create Task",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def tasktracker_create_task(params: TaskCreateInput, ctx: Context) -> str:
    """
    Create a new task.

    Args:
        params: Task creation parameters:
            - title (str): Task title (required)
            - description (str): Task description
            - priority (str): 'LOW', 'MEDIUM', 'HIGH'

    Returns:
        The created task, or the reason creation failed.

    Examples:
        - Simple task: title="Buy milk"
        - With priority: title="Submit report", priority="HIGH"
    """
    try:
        client = get_client(ctx)
        result = await client.tasks.create(
            params.title,
            description=params.description,
            priority=params.priority,
        )
        return render_task_result(result, "Task Created", params.response_format)
    except Exception as e:
        return handle_error(e, "create_task")


@mcp.tool(
    name="tasktracker_update_task",
    annotations={
        "title": "Update Task",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def tasktracker_update_task(params: TaskUpdateInput, ctx: Context) -> str:
    """
    Update a task's title, description, priority or status.

    Only loaded tasks can be updated; call tasktracker_list_tasks first.

    Args:
        params: Update parameters:
            - task_id: Task identifier (required)
            - title, description, priority, status: New values (optional)

    Returns:
        The updated task, or the reason the update failed.
    """
    try:
        client = get_client(ctx)
        result = await client.tasks.update(
            params.task_id,
            title=params.title,
            description=params.description,
            priority=params.priority,
            status=params.status,
        )
        return render_task_result(result, "Task Updated", params.response_format)
    except Exception as e:
        return handle_error(e, "update_task")


@mcp.tool(
    name="tasktracker_toggle_task",
    annotations={
        "title": "Toggle Task Completion",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def tasktracker_toggle_task(params: TaskIdInput, ctx: Context) -> str:
    """
    Mark a task completed, or reopen a completed task.

    Args:
        params: Task identifier

    Returns:
        The task with its new status, or the reason the toggle failed.
    """
    try:
        client = get_client(ctx)
        result = await client.tasks.toggle_complete(params.task_id)
        return render_task_result(result, "Task Toggled", params.response_format)
    except Exception as e:
        return handle_error(e, "toggle_task")


@mcp.tool(
    name="tasktracker_delete_task",
    annotations={
        "title": "Delete Task",
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def tasktracker_delete_task(params: TaskIdInput, ctx: Context) -> str:
    """
    Delete a task permanently.

    Args:
        params: Task identifier

    Returns:
        Confirmation, or the reason deletion failed.
    """
    try:
        client = get_client(ctx)
        result = await client.tasks.delete(params.task_id)
        if result.skipped:
            return error_message(f"Task `{params.task_id}` is not loaded.", "Call tasktracker_list_tasks first.")
        if result.error:
            return client_error_message(result.error)
        return success_message(f"Task `{params.task_id}` deleted.")
    except Exception as e:
        return handle_error(e, "delete_task")


# =============================================================================
# Edit Draft Tools
# =============================================================================


@mcp.tool(
    name="tasktracker_start_edit",
    annotations={
        "title": "Start Editing Task",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
async def tasktracker_start_edit(params: TaskIdInput, ctx: Context) -> str:
    """
    Open a local edit draft for a task.

    Nothing is sent to the server until tasktracker_save_edit is called.
    """
    try:
        draft = get_client(ctx).tasks.start_edit(params.task_id)
        if draft is None:
            return error_message(f"Task `{params.task_id}` is not loaded.", "Call tasktracker_list_tasks first.")
        if params.response_format == ResponseFormat.MARKDOWN:
            return format_draft_markdown(draft)
        return json.dumps({"draft": format_draft_json(draft)}, indent=2)
    except Exception as e:
        return handle_error(e, "start_edit")


@mcp.tool(
    name="tasktracker_save_edit",
    annotations={
        "title": "Save Task Edit",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def tasktracker_save_edit(params: DraftSaveInput, ctx: Context) -> str:
    """
    Apply optional changes to the open draft and commit it to the server.

    Args:
        params: Draft changes:
            - title, description, priority: New values (optional)

    Returns:
        The updated task, or the reason saving failed (the draft is kept).
    """
    try:
        tasks = get_client(ctx).tasks
        if tasks.draft is None:
            return error_message("No task is being edited.", "Call tasktracker_start_edit first.")
        tasks.edit_draft(title=params.title, description=params.description, priority=params.priority)
        result = await tasks.save_edit()
        return render_task_result(result, "Task Saved", params.response_format)
    except Exception as e:
        return handle_error(e, "save_edit")


@mcp.tool(
    name="tasktracker_cancel_edit",
    annotations={
        "title": "Cancel Task Edit",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
async def tasktracker_cancel_edit(ctx: Context) -> str:
    """Discard the open edit draft."""
    try:
        get_client(ctx).tasks.cancel_edit()
        return success_message("Edit discarded.")
    except Exception as e:
        return handle_error(e, "cancel_edit")


# =============================================================================
# State Tools
# =============================================================================


@mcp.tool(
    name="tasktracker_get_state",
    annotations={
        "title": "Get Client State",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
async def tasktracker_get_state(ctx: Context, response_format: ResponseFormat = ResponseFormat.MARKDOWN) -> str:
    """
    Show the client's current local state without contacting the server.

    Includes sign-in status, cached tasks, the last error and any open draft.
    """
    try:
        client = get_client(ctx)
        tasks = client.tasks
        state = dict(
            authenticated=client.is_authenticated,
            tasks=tasks.tasks,
            busy=tasks.busy,
            last_error=tasks.last_error,
            draft=tasks.draft,
        )
        if response_format == ResponseFormat.MARKDOWN:
            return format_state_markdown(**state)
        return json.dumps(format_state_json(**state), indent=2)
    except Exception as e:
        return handle_error(e, "get_state")


@mcp.tool(
    name="tasktracker_dismiss_error",
    annotations={
        "title": "Dismiss Error",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
async def tasktracker_dismiss_error(ctx: Context) -> str:
    """Clear the last error message."""
    try:
        get_client(ctx).tasks.dismiss_error()
        return success_message("Error dismissed.")
    except Exception as e:
        return handle_error(e, "dismiss_error")


# =============================================================================
# Main Entry Point
# =============================================================================


def main():
    """Main entry point for the Task Tracker MCP server."""
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    mcp.run()


if __name__ == "__main__":
    main()
