"""
Task Tracker MCP - client and MCP server for a task-tracking REST backend.

This package signs a user in against the backend, keeps the session token
across restarts, and keeps a local task list in step with the server
through CRUD calls. An MCP server exposes it as tools.

Architecture:
    MCP Tools Layer
         │
         ▼
    TaskTrackerClient
         │
    ┌────┴────┐
    ▼         ▼
 AuthFlow  TaskStore
    │         │
    └────┬────┘
         ▼
  TransportClient ──► SessionStore
"""

__version__ = "0.1.0"
__author__ = "Task Tracker MCP Contributors"

from tasktracker_mcp.client import TaskTrackerClient
from tasktracker_mcp.errors import ClientError, ErrorKind
from tasktracker_mcp.exceptions import TaskTrackerError, TaskTrackerConfigurationError
from tasktracker_mcp.results import Result

__all__ = [
    "__version__",
    "TaskTrackerClient",
    "ClientError",
    "ErrorKind",
    "Result",
    "TaskTrackerError",
    "TaskTrackerConfigurationError",
]
