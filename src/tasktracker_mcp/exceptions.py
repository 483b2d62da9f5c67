"""
Task Tracker Exceptions.

Only misuse of the library raises. Everything the server or the network can
do to a request is reported as a value (see :mod:`tasktracker_mcp.errors`).
"""

from __future__ import annotations


class TaskTrackerError(Exception):
    """Base exception for the task tracker client."""


class TaskTrackerConfigurationError(TaskTrackerError):
    """The client is misconfigured or used outside its lifecycle."""
