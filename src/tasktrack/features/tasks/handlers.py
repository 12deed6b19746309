"""API handlers for the task dashboard."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from tasktrack.features.errors import http_error_for
from tasktrack.features.tasks.schemas import (
    TaskCreateRequest,
    TaskFilterRequest,
    TaskListResponse,
    TaskStatusRequest,
    TaskSyncResponse,
    TaskUpdateRequest,
)
from tasktrack.services import PostHogService
from tasktrack.services.auth.dependencies import (
    get_task_gateway,
    get_task_state,
    require_verified_session,
)
from tasktrack.services.database import TaskGateway
from tasktrack.services.rate_limiter import default_rate_limit, write_rate_limit
from tasktrack.state import Session, Task, TaskFilter, TaskState, TaskStats, TaskStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])


def _list_response(task_state: TaskState, search: str | None) -> TaskListResponse:
    tasks = task_state.get_visible_tasks(search)
    return TaskListResponse(
        data=tasks,
        count=len(tasks),
        filter=task_state.filter,
        search=search,
        stats=task_state.get_stats(),
    )


@router.get("", response_model=TaskListResponse)
@default_rate_limit
async def list_tasks(
    request: Request,
    task_filter: TaskFilter | None = Query(
        None, alias="filter", description="Set the active filter before listing"
    ),
    search: str | None = Query(None, max_length=200, description="Search name and description"),
    session: Session = Depends(require_verified_session),
    task_state: TaskState = Depends(get_task_state),
) -> TaskListResponse:
    """
    Get the local task list under the active filter and an optional search.

    Passing `filter` also makes it the active filter for later requests.
    Stats always cover the full list.

    Args:
        task_filter: Optional new active filter (all, pending, completed)
        search: Case-insensitive text matched against name and description

    Returns:
        Visible tasks, the active filter and dashboard stats
    """
    if task_filter is not None:
        task_state.set_filter(task_filter.value)
    return _list_response(task_state, search)


@router.put("/filter", response_model=TaskListResponse)
@default_rate_limit
async def set_task_filter(
    request: Request,
    payload: TaskFilterRequest,
    session: Session = Depends(require_verified_session),
    task_state: TaskState = Depends(get_task_state),
) -> TaskListResponse:
    """Change the active filter and return the resulting view."""
    task_state.set_filter(payload.filter.value)
    return _list_response(task_state, None)


@router.get("/stats", response_model=TaskStats)
@default_rate_limit
async def get_task_stats(
    request: Request,
    session: Session = Depends(require_verified_session),
    task_state: TaskState = Depends(get_task_state),
) -> TaskStats:
    """Get total, pending, completed and overdue counts."""
    return task_state.get_stats()


@router.post("/sync", response_model=TaskSyncResponse)
@write_rate_limit
async def sync_tasks(
    request: Request,
    session: Session = Depends(require_verified_session),
    gateway: TaskGateway = Depends(get_task_gateway),
    task_state: TaskState = Depends(get_task_state),
) -> TaskSyncResponse:
    """
    Replace the local task list with the remote one.

    Any task held only locally is lost; this is a full overwrite.

    Raises:
        HTTPException: 502 if the remote store cannot be read
    """
    result = gateway.sync(session.user_id, task_state.set_tasks)
    if not result.success:
        raise http_error_for(result, "Failed to sync tasks")

    PostHogService().capture(
        distinct_id=session.user_id,
        event="tasks_synced",
        properties={"count": len(result.data or [])},
    )
    return TaskSyncResponse(count=len(result.data or []))


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
@write_rate_limit
async def create_task(
    request: Request,
    payload: TaskCreateRequest,
    session: Session = Depends(require_verified_session),
    gateway: TaskGateway = Depends(get_task_gateway),
    task_state: TaskState = Depends(get_task_state),
) -> Task:
    """
    Create a task remotely, then append it to the local list.

    Raises:
        HTTPException: 422 for invalid fields, 502 if the remote write fails
    """
    result = gateway.create(payload, session.user_id)
    if not result.success:
        raise http_error_for(result, "Failed to add task")

    task = result.data
    task_state.add_task(task)

    PostHogService().capture(
        distinct_id=session.user_id,
        event="task_created",
        properties={"task_id": task.id},
    )
    return task


@router.get("/{task_id}", response_model=Task)
@default_rate_limit
async def get_task(
    request: Request,
    task_id: str,
    session: Session = Depends(require_verified_session),
    task_state: TaskState = Depends(get_task_state),
) -> Task:
    """
    Get a task from the local list.

    Raises:
        HTTPException: 404 if the task is not held locally
    """
    task = task_state.get_task_by_id(task_id)
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return task


@router.put("/{task_id}", response_model=Task)
@write_rate_limit
async def update_task(
    request: Request,
    task_id: str,
    payload: TaskUpdateRequest,
    session: Session = Depends(require_verified_session),
    gateway: TaskGateway = Depends(get_task_gateway),
    task_state: TaskState = Depends(get_task_state),
) -> Task:
    """
    Edit name, description and deadline remotely, then merge locally.

    The id is not checked locally first; the remote store decides.

    Raises:
        HTTPException: 404 if the task does not exist remotely, 502 on write failure
    """
    result = gateway.update(task_id, payload, owner_id=session.user_id)
    if not result.success:
        raise http_error_for(result, "Failed to update task")

    task_state.update_task(
        task_id, {**payload.model_dump(), "updated_at": result.data.updated_at}
    )

    PostHogService().capture(
        distinct_id=session.user_id,
        event="task_updated",
        properties={"task_id": task_id, "fields": ["name", "description", "deadline"]},
    )
    return task_state.get_task_by_id(task_id) or result.data


async def _apply_status(
    task_id: str,
    new_status: TaskStatus,
    session: Session,
    gateway: TaskGateway,
    task_state: TaskState,
) -> Task:
    result = gateway.update_status(task_id, new_status, owner_id=session.user_id)
    if not result.success:
        raise http_error_for(result, "Failed to update status")

    task_state.update_task(
        task_id, {"status": new_status, "updated_at": result.data.updated_at}
    )

    PostHogService().capture(
        distinct_id=session.user_id,
        event="task_updated",
        properties={"task_id": task_id, "status": new_status.value},
    )
    return task_state.get_task_by_id(task_id) or result.data


@router.patch("/{task_id}/status", response_model=Task)
@write_rate_limit
async def update_task_status(
    request: Request,
    task_id: str,
    payload: TaskStatusRequest,
    session: Session = Depends(require_verified_session),
    gateway: TaskGateway = Depends(get_task_gateway),
    task_state: TaskState = Depends(get_task_state),
) -> Task:
    """
    Set a task's status remotely, then locally.

    Raises:
        HTTPException: 404 if the task does not exist remotely, 502 on write failure
    """
    return await _apply_status(task_id, payload.status, session, gateway, task_state)


@router.post("/{task_id}/toggle", response_model=Task)
@write_rate_limit
async def toggle_task_status(
    request: Request,
    task_id: str,
    session: Session = Depends(require_verified_session),
    gateway: TaskGateway = Depends(get_task_gateway),
    task_state: TaskState = Depends(get_task_state),
) -> Task:
    """
    Flip a task between Pending and Completed.

    Raises:
        HTTPException: 404 if the task is not held locally or no longer exists remotely
    """
    task = task_state.get_task_by_id(task_id)
    if task is None:
        logger.warning(
            f"Toggle requested for task {task_id} not held locally",
            extra={"user_id": session.user_id},
        )
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")

    new_status = (
        TaskStatus.COMPLETED if task.status == TaskStatus.PENDING else TaskStatus.PENDING
    )
    return await _apply_status(task_id, new_status, session, gateway, task_state)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
@write_rate_limit
async def delete_task(
    request: Request,
    task_id: str,
    session: Session = Depends(require_verified_session),
    gateway: TaskGateway = Depends(get_task_gateway),
    task_state: TaskState = Depends(get_task_state),
) -> Response:
    """
    Delete a task remotely, then drop it locally.

    Raises:
        HTTPException: 404 if the task does not exist remotely, 502 on write failure
    """
    result = gateway.delete(task_id, owner_id=session.user_id)
    if not result.success:
        raise http_error_for(result, "Failed to delete task")

    task_state.delete_task(task_id)

    PostHogService().capture(
        distinct_id=session.user_id,
        event="task_deleted",
        properties={"task_id": task_id},
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
