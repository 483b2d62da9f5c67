"""
Task Tracker Constants.

Enumerations and fixed values shared by the session, transport and task
layers. Wire values match the backend's JSON representation exactly.
"""

from __future__ import annotations

from enum import Enum


# =============================================================================
# Task Enumerations
# =============================================================================


class TaskStatus(str, Enum):
    """Task lifecycle status as reported by the backend."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"

    def toggled(self) -> TaskStatus:
        """Return the status a completion toggle moves to."""
        if self is TaskStatus.COMPLETED:
            return TaskStatus.PENDING
        return TaskStatus.COMPLETED


class TaskPriority(str, Enum):
    """Task priority levels."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


# =============================================================================
# Backend Endpoints
# =============================================================================


class Endpoint:
    """REST paths consumed by the client, relative to the base URL."""

    SIGN_IN = "/api/auth/signin"
    SIGN_UP = "/api/auth/signup"
    HEALTH = "/api/auth/test"
    TASKS = "/api/tasks"

    @staticmethod
    def task(task_id: int | str) -> str:
        """Path of a single task resource."""
        return f"{Endpoint.TASKS}/{task_id}"


# =============================================================================
# Defaults
# =============================================================================

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_TIMEOUT = 15.0

# Durable storage key the session token lives under
TOKEN_STORAGE_KEY = "token"

MIN_PASSWORD_LENGTH = 6

JSON_CONTENT_TYPE = "application/json"
