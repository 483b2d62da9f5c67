"""Task list state and reconciliation."""

from tasktracker_mcp.tasks.store import TaskStore

__all__ = ["TaskStore"]
