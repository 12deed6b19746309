"""Pydantic schemas for task endpoints."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tasktrack.state import Task, TaskFilter, TaskStats, TaskStatus


class TaskFieldsRequest(BaseModel):
    """Editable task fields, validated the same way on create and edit."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=3, max_length=100, description="Task name")
    description: str = Field(min_length=1, max_length=500, description="Task description")
    deadline: date = Field(description="Due date (today or later)")

    @field_validator("deadline")
    @classmethod
    def deadline_not_in_past(cls, value: date) -> date:
        if value < date.today():
            raise ValueError("Deadline must be today or in the future")
        return value


class TaskCreateRequest(TaskFieldsRequest):
    """Request model for creating a task. New tasks always start Pending."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "name": "Buy milk",
                "description": "2% from the corner shop",
                "deadline": "2030-01-01",
            }
        },
    )


class TaskUpdateRequest(TaskFieldsRequest):
    """Request model for editing a task's name, description and deadline."""


class TaskStatusRequest(BaseModel):
    """Request model for changing a task's status."""

    status: TaskStatus


class TaskFilterRequest(BaseModel):
    """Request model for changing the active list filter."""

    filter: TaskFilter


class TaskListResponse(BaseModel):
    """Filtered and searched view of the local task list."""

    data: list[Task]
    count: int
    filter: str
    search: str | None = None
    stats: TaskStats


class TaskSyncResponse(BaseModel):
    """Result of replacing local tasks with the remote list."""

    count: int
    message: str = "Tasks synced successfully"
