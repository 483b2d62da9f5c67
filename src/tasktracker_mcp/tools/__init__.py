"""
Task Tracker MCP Tools Package.

Input models and response formatting for the MCP server tools:
    - Auth tools (sign in, sign up, sign out, server check)
    - Task tools (list, create, update, toggle, delete)
    - Edit draft tools (start, save, cancel)
    - State tools (get state, dismiss error)
"""

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

__all__ = [
    "ResponseFormat",
    "SignInInput",
    "SignUpInput",
    "TaskListInput",
    "TaskCreateInput",
    "TaskUpdateInput",
    "TaskIdInput",
    "DraftSaveInput",
]
