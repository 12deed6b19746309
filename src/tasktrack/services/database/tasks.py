"""Gateway to the remote task table."""

import logging
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel

from tasktrack.services.database.exceptions import StorageError
from tasktrack.services.database.utils import SupabaseQueryBuilder
from tasktrack.services.results import GatewayResult
from tasktrack.state.models import Task, TaskStatus

logger = logging.getLogger(__name__)

# Columns owned by the store; callers cannot set them through create/update.
_PROTECTED_FIELDS = {"id", "user_id", "created_at", "updated_at"}


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def _as_storage_error(error: Exception, code: str) -> StorageError:
    if isinstance(error, StorageError):
        return error
    message = getattr(error, "message", None) or str(error) or error.__class__.__name__
    return StorageError(message, code=code)


class TaskGateway:
    """
    Thin CRUD wrapper around the Supabase `tasks` table.

    Every operation returns a GatewayResult; StorageError is raised
    internally and converted at this boundary. Nothing is retried.

    Example:
        >>> gateway = TaskGateway(get_query_builder())
        >>> result = gateway.create(
        ...     {"name": "Buy milk", "description": "2%", "deadline": "2030-01-01"}, "u1"
        ... )
        >>> result.data.status
        <TaskStatus.PENDING: 'Pending'>
    """

    def __init__(
        self,
        db: SupabaseQueryBuilder,
        table: str = "tasks",
        newest_first: bool = True,
    ) -> None:
        self.db = db
        self.table = table
        self.newest_first = newest_first

    @staticmethod
    def _encode(fields: Mapping[str, Any] | BaseModel) -> dict[str, Any]:
        if isinstance(fields, BaseModel):
            fields = fields.model_dump(exclude_none=True)
        encoded = jsonable_encoder(dict(fields))
        return {key: value for key, value in encoded.items() if key not in _PROTECTED_FIELDS}

    def create(
        self, fields: Mapping[str, Any] | BaseModel, owner_id: str
    ) -> GatewayResult[Task]:
        """
        Store a new task owned by `owner_id`.

        Args:
            fields: name, description, deadline and optionally status
            owner_id: User ID of the creating session

        Returns:
            Result carrying the stored Task (with its new id)
        """
        try:
            now = _utcnow()
            record = {
                "status": TaskStatus.PENDING.value,
                **self._encode(fields),
                "user_id": owner_id,
                "created_at": now,
                "updated_at": now,
            }
            stored = self.db.insert_record(self.table, record)
            if not stored:
                raise StorageError("Task could not be saved", code="write_failed")

            task = Task.model_validate(stored)
            logger.info(f"Created task {task.id} for user {owner_id}")
            return GatewayResult[Task].ok(task)

        except Exception as e:
            error = _as_storage_error(e, "write_failed")
            logger.error(f"Add task error: {error}", extra={"user_id": owner_id})
            return GatewayResult[Task].fail(error)

    def list_by_owner(self, owner_id: str) -> GatewayResult[list[Task]]:
        """
        Fetch every task owned by `owner_id`, ordered by creation time.

        Rows whose owner does not match are dropped even if the backend
        returned them.
        """
        try:
            rows = self.db.list_records(
                self.table,
                filters={"user_id": owner_id},
                order_by="created_at",
                order_desc=self.newest_first,
            )
            tasks = [Task.model_validate(row) for row in rows or []]
            owned = [task for task in tasks if task.user_id == owner_id]
            if len(owned) != len(tasks):
                logger.warning(
                    f"Dropped {len(tasks) - len(owned)} tasks not owned by user {owner_id}"
                )
            return GatewayResult[list[Task]].ok(owned)

        except Exception as e:
            error = _as_storage_error(e, "read_failed")
            logger.error(f"Get tasks error: {error}", extra={"user_id": owner_id})
            return GatewayResult[list[Task]].fail(error)

    def update(
        self,
        task_id: str,
        fields: Mapping[str, Any] | BaseModel,
        owner_id: str | None = None,
    ) -> GatewayResult[Task]:
        """
        Apply a partial update and refresh `updated_at`.

        Args:
            task_id: Remote task ID
            fields: Fields to change
            owner_id: If given, only a task owned by this user is touched

        Returns:
            Result carrying the updated Task; fails with code "not_found"
            when no remote row matched
        """
        try:
            data = {**self._encode(fields), "updated_at": _utcnow()}
            filters = {"id": task_id}
            if owner_id is not None:
                filters["user_id"] = owner_id

            rows = self.db.update_by_filter(self.table, filters, data)
            if not rows:
                raise StorageError(f"Task {task_id} not found", code="not_found")

            return GatewayResult[Task].ok(Task.model_validate(rows[0]))

        except Exception as e:
            error = _as_storage_error(e, "write_failed")
            logger.error(f"Update task error: {error}", extra={"task_id": task_id})
            return GatewayResult[Task].fail(error)

    def update_status(
        self, task_id: str, status: TaskStatus, owner_id: str | None = None
    ) -> GatewayResult[Task]:
        """Set the task status (refreshes `updated_at`)."""
        return self.update(task_id, {"status": TaskStatus(status)}, owner_id=owner_id)

    def delete(self, task_id: str, owner_id: str | None = None) -> GatewayResult[str]:
        """Remove a task remotely; fails with code "not_found" if absent."""
        try:
            filters = {"id": task_id}
            if owner_id is not None:
                filters["user_id"] = owner_id

            rows = self.db.delete_by_filter(self.table, filters)
            if not rows:
                raise StorageError(f"Task {task_id} not found", code="not_found")

            logger.info(f"Deleted task {task_id}")
            return GatewayResult[str].ok(task_id)

        except Exception as e:
            error = _as_storage_error(e, "write_failed")
            logger.error(f"Delete task error: {error}", extra={"task_id": task_id})
            return GatewayResult[str].fail(error)

    def sync(
        self, owner_id: str, apply: Callable[[list[Task]], None]
    ) -> GatewayResult[list[Task]]:
        """
        Replace local tasks with the remote list.

        This is a full overwrite, not a merge: anything held only locally is
        discarded. `apply` is not called when the fetch fails.

        Args:
            owner_id: User whose tasks are fetched
            apply: Receives the remote list (normally TaskState.set_tasks)
        """
        result = self.list_by_owner(owner_id)
        if result.success:
            apply(result.data or [])
            logger.info(f"Synced {len(result.data or [])} tasks for user {owner_id}")
        return result
