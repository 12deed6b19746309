"""Local store for the user's task list and active filter."""

import logging
from datetime import date
from typing import Any

from pydantic import ValidationError

from tasktrack.state.models import Task, TaskFilter, TaskSnapshot, TaskStats, TaskStatus
from tasktrack.state.persistence import JsonStateStorage

logger = logging.getLogger(__name__)

TASK_STORAGE_KEY = "task-storage"


class TaskState:
    """
    Ordered in-memory task list plus the active view filter.

    Operations never fail. Every mutation saves the snapshot (tasks and
    filter) through the storage hook; a failed save is logged and otherwise
    ignored.
    """

    def __init__(self, storage: JsonStateStorage | None = None) -> None:
        self._storage = storage
        snapshot = self._load()
        self._tasks: list[Task] = list(snapshot.tasks)
        self._filter: str = snapshot.filter

    def _load(self) -> TaskSnapshot:
        if self._storage is None:
            return TaskSnapshot()

        data = self._storage.load()
        if data is None:
            return TaskSnapshot()

        try:
            return TaskSnapshot.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable task snapshot: {e}")
            return TaskSnapshot()

    def _save(self) -> None:
        if self._storage is None:
            return
        snapshot = {
            "tasks": [task.model_dump(mode="json", warnings=False) for task in self._tasks],
            "filter": self._filter,
        }
        try:
            self._storage.save(snapshot)
        except OSError as e:
            logger.warning(f"Failed to persist task state: {e}")

    # Actions

    def set_tasks(self, tasks: list[Task]) -> None:
        """Replace the whole list (used after a sync)."""
        self._tasks = list(tasks)
        self._save()

    def add_task(self, task: Task) -> None:
        """Append a task. Duplicate ids are not checked."""
        self._tasks.append(task)
        self._save()

    def update_task(self, task_id: str, updates: dict[str, Any]) -> None:
        """Merge `updates` into the task with `task_id`; no-op if absent."""
        updates = {key: value for key, value in updates.items() if key != "id"}
        changed = False
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                self._tasks[index] = task.model_copy(update=updates)
                changed = True
        if changed:
            self._save()

    def delete_task(self, task_id: str) -> None:
        """Remove the task with `task_id`; no-op if absent."""
        remaining = [task for task in self._tasks if task.id != task_id]
        if len(remaining) != len(self._tasks):
            self._tasks = remaining
            self._save()

    def set_filter(self, value: str) -> None:
        """Set the active filter. Unknown values behave like "all"."""
        self._filter = value.value if isinstance(value, TaskFilter) else value
        self._save()

    def clear_tasks(self) -> None:
        """Drop every task; the filter is kept."""
        self._tasks = []
        self._save()

    # Getters

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    @property
    def filter(self) -> str:
        return self._filter

    def get_tasks(self) -> list[Task]:
        return self.tasks

    def get_task_by_id(self, task_id: str) -> Task | None:
        return next((task for task in self._tasks if task.id == task_id), None)

    def get_filtered_tasks(self) -> list[Task]:
        """Tasks matching the active filter, in list order."""
        if self._filter == TaskFilter.PENDING.value:
            return [task for task in self._tasks if task.status == TaskStatus.PENDING]
        if self._filter == TaskFilter.COMPLETED.value:
            return [task for task in self._tasks if task.status == TaskStatus.COMPLETED]
        return list(self._tasks)

    def search_tasks(self, term: str | None, tasks: list[Task] | None = None) -> list[Task]:
        """
        Case-insensitive substring search over name and description.

        Args:
            term: Search text; None or blank returns the input unchanged
            tasks: Tasks to search (default: every task)

        Returns:
            Matching tasks in input order
        """
        source = self._tasks if tasks is None else tasks
        if not term or not term.strip():
            return list(source)

        needle = term.lower()
        return [
            task
            for task in source
            if needle in task.name.lower() or needle in task.description.lower()
        ]

    def get_visible_tasks(self, search: str | None = None) -> list[Task]:
        """The filtered view narrowed by an optional search term."""
        return self.search_tasks(search, self.get_filtered_tasks())

    def get_stats(self, today: date | None = None) -> TaskStats:
        """
        Counters over the full list, ignoring the active filter.

        A task is overdue when its deadline is strictly before `today`,
        whatever its status.
        """
        today = today or date.today()
        return TaskStats(
            total=len(self._tasks),
            pending=sum(1 for task in self._tasks if task.status == TaskStatus.PENDING),
            completed=sum(1 for task in self._tasks if task.status == TaskStatus.COMPLETED),
            overdue=sum(1 for task in self._tasks if task.deadline < today),
        )
