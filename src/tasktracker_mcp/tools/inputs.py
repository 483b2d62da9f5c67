"""
Pydantic Input Models for Task Tracker MCP Tools.

This module defines the input validation models used by the MCP tools.
Each model includes field constraints and descriptions shown to the caller.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tasktracker_mcp.constants import TaskPriority, TaskStatus


class ResponseFormat(str, Enum):
    """Output format for tool responses."""

    MARKDOWN = "markdown"
    JSON = "json"


class BaseMCPInput(BaseModel):
    """Base input model with common configuration."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",
    )


TaskId = Union[int, str]


def _upper(v: Optional[str]) -> Optional[str]:
    return v.upper() if isinstance(v, str) else v


# =============================================================================
# Auth Input Models
# =============================================================================


class SignInInput(BaseMCPInput):
    """Input for signing in."""

    email: str = Field(
        default="",
        description="Account email, used as the username",
        max_length=254,
    )
    password: str = Field(
        default="",
        description="Account password",
        max_length=128,
    )


class SignUpInput(BaseMCPInput):
    """Input for registering a new account."""

    email: str = Field(
        default="",
        description="Email for the new account (also used as username)",
        max_length=254,
    )
    password: str = Field(
        default="",
        description="Password (at least 6 characters)",
        max_length=128,
    )
    confirm_password: str = Field(
        default="",
        description="Password again, must match",
        max_length=128,
    )


# =============================================================================
# Task Input Models
# =============================================================================


class TaskListInput(BaseMCPInput):
    """Input for (re)loading the task list."""

    status: Optional[TaskStatus] = Field(
        default=None,
        description="Only show tasks with this status: 'PENDING', 'IN_PROGRESS', 'COMPLETED'",
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable, 'json' for machine-readable",
    )

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: Optional[str]) -> Optional[str]:
        return _upper(v)


class TaskCreateInput(BaseMCPInput):
    """Input for creating a new task."""

    title: str = Field(
        ...,
        description="Task title (e.g., 'Buy milk', 'Review quarterly report')",
        min_length=1,
        max_length=100,
    )
    description: str = Field(
        default="",
        description="Task description",
        max_length=500,
    )
    priority: TaskPriority = Field(
        default=TaskPriority.MEDIUM,
        description="Priority: 'LOW', 'MEDIUM', 'HIGH'",
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format",
    )

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, v: Optional[str]) -> Optional[str]:
        return _upper(v)


class TaskUpdateInput(BaseMCPInput):
    """Input for updating a task. Omitted fields keep their current value."""

    task_id: TaskId = Field(..., description="Identifier of the task to update")
    title: Optional[str] = Field(
        default=None,
        description="New task title",
        min_length=1,
        max_length=100,
    )
    description: Optional[str] = Field(
        default=None,
        description="New task description",
        max_length=500,
    )
    priority: Optional[TaskPriority] = Field(
        default=None,
        description="New priority: 'LOW', 'MEDIUM', 'HIGH'",
    )
    status: Optional[TaskStatus] = Field(
        default=None,
        description="New status: 'PENDING', 'IN_PROGRESS', 'COMPLETED'",
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format",
    )

    @field_validator("priority", "status", mode="before")
    @classmethod
    def normalize_enums(cls, v: Optional[str]) -> Optional[str]:
        return _upper(v)


class TaskIdInput(BaseMCPInput):
    """Input for tools acting on a single task (toggle, delete, start edit)."""

    task_id: TaskId = Field(..., description="Task identifier")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format",
    )


class DraftSaveInput(BaseMCPInput):
    """Input for committing the open edit draft, optionally changing it first."""

    title: Optional[str] = Field(default=None, description="Draft title", max_length=100)
    description: Optional[str] = Field(default=None, description="Draft description", max_length=500)
    priority: Optional[TaskPriority] = Field(default=None, description="Draft priority")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format",
    )

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, v: Optional[str]) -> Optional[str]:
        return _upper(v)
