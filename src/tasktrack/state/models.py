"""Pydantic models for the locally held session and task state."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TaskStatus(str, Enum):
    """Task lifecycle status."""

    PENDING = "Pending"
    COMPLETED = "Completed"


class TaskFilter(str, Enum):
    """View-level filter applied to the task list."""

    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"


class Session(BaseModel):
    """
    Authenticated-user context held by the client.

    The empty form (all defaults) is the anonymous session. A snapshot read
    from local storage may lack fields; missing ones fall back to defaults.
    """

    model_config = ConfigDict(extra="ignore")

    user_id: str | None = None
    email: str | None = None
    is_authenticated: bool = False
    is_email_verified: bool = False


class Task(BaseModel):
    """
    A single task as stored remotely and mirrored locally.

    `id` is assigned by the remote store; a task that never reached the
    remote store has none.
    """

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    name: str
    description: str
    deadline: date
    status: TaskStatus = TaskStatus.PENDING
    user_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TaskStats(BaseModel):
    """Derived counters over the full task list."""

    total: int = Field(ge=0)
    pending: int = Field(ge=0)
    completed: int = Field(ge=0)
    overdue: int = Field(ge=0)


class TaskSnapshot(BaseModel):
    """Persisted form of the task store."""

    model_config = ConfigDict(extra="ignore")

    tasks: list[Task] = []
    filter: str = TaskFilter.ALL.value
