"""Locally persisted client state (session and tasks)."""

from tasktrack.state.auth_state import AUTH_STORAGE_KEY, AuthState
from tasktrack.state.models import Session, Task, TaskFilter, TaskStats, TaskStatus
from tasktrack.state.persistence import JsonStateStorage
from tasktrack.state.task_state import TASK_STORAGE_KEY, TaskState

__all__ = [
    "AUTH_STORAGE_KEY",
    "TASK_STORAGE_KEY",
    "AuthState",
    "TaskState",
    "JsonStateStorage",
    "Session",
    "Task",
    "TaskFilter",
    "TaskStats",
    "TaskStatus",
]
