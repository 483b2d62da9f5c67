"""
Task Tracker Data Models.

Pydantic models for the backend's resources and the client's local state.

Models:
    - Task: Task resource as returned by the backend
    - TaskDraft: Local edit buffer for a task
    - Session: Sign-in result carrying the access token
"""

from tasktracker_mcp.models.task import Task, TaskDraft
from tasktracker_mcp.models.session import Session

__all__ = [
    "Task",
    "TaskDraft",
    "Session",
]
