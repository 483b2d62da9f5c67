"""
Task Models.

``Task`` mirrors the backend's task resource. Instances are only ever built
from server payloads; the server assigns ``id`` and ``createdAt``.
``TaskDraft`` is the local edit buffer and never enters the task list.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tasktracker_mcp.constants import TaskPriority, TaskStatus


class Task(BaseModel):
    """A task as returned by the backend."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    id: int | str
    title: str = Field(..., min_length=1)
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    created_at: datetime = Field(..., alias="createdAt")
    due_date: datetime | None = Field(default=None, alias="dueDate")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    @field_validator("description", mode="before")
    @classmethod
    def _null_description(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("status", mode="before")
    @classmethod
    def _null_status(cls, v: Any) -> Any:
        return TaskStatus.PENDING if v is None else v

    @field_validator("priority", mode="before")
    @classmethod
    def _null_priority(cls, v: Any) -> Any:
        return TaskPriority.MEDIUM if v is None else v

    # =========================================================================
    # Conversion
    # =========================================================================

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Task:
        """Build a task from a backend JSON object."""
        return cls.model_validate(data)

    @classmethod
    def list_from_api(cls, data: list[dict[str, Any]]) -> list[Task]:
        """Build tasks from a backend JSON array."""
        return [cls.model_validate(item) for item in data]

    def to_update_body(
        self,
        *,
        title: str | None = None,
        description: str | None = None,
        priority: TaskPriority | None = None,
        status: TaskStatus | None = None,
    ) -> dict[str, Any]:
        """
        Build the full PUT body, echoing every field not overridden.

        The backend replaces title and description wholesale, so the body is
        never partial.
        """
        return {
            "title": self.title if title is None else title,
            "description": self.description if description is None else description,
            "priority": (self.priority if priority is None else priority).value,
            "status": (self.status if status is None else status).value,
        }

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED


class TaskDraft(BaseModel):
    """Edit buffer for a task while the user composes changes."""

    model_config = ConfigDict(validate_assignment=True)

    task_id: int | str
    title: str
    description: str = ""
    priority: TaskPriority = TaskPriority.MEDIUM

    @classmethod
    def from_task(cls, task: Task) -> TaskDraft:
        return cls(
            task_id=task.id,
            title=task.title,
            description=task.description,
            priority=task.priority,
        )
