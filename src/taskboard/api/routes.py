# src/taskboard/api/routes.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse

from taskboard.domain.errors import (
    NotFoundError,
    StorageError,
    TaskboardError,
    ValidationError,
)
from taskboard.domain.models import (
    ErrorResponse,
    MessageResponse,
    TaskCreate,
    TaskFilter,
    TaskListResponse,
    TaskResponse,
    TaskUpdate,
)
from taskboard.logging import get_logger
from taskboard.storage import TaskRepo

from .deps import get_repo

_LOG = get_logger(__name__)
router = APIRouter()


def _error_response(err: TaskboardError, http_status: int) -> JSONResponse:
    payload = ErrorResponse(
        error=err.message,
        code=err.code,
        details=err.details or {},
    ).model_dump()
    return JSONResponse(status_code=http_status, content=payload)


def _storage_failure(err: StorageError, action: str) -> JSONResponse:
    # Internal detail stays in the logs.
    _LOG.error("%s failed: %s", action, err)
    payload = ErrorResponse(error=f"Failed to {action}", code=err.code).model_dump()
    return JSONResponse(status_code=500, content=payload)


@router.get("/healthz")
def healthz() -> dict:
    return {"ok": True}


@router.get("/api/tasks", response_model=TaskListResponse)
def list_tasks(
    completed: Optional[bool] = Query(default=None),
    repo: TaskRepo = Depends(get_repo),
):
    try:
        tasks = repo.list_tasks(TaskFilter(completed=completed))
    except StorageError as e:
        return _storage_failure(e, "list tasks")
    return TaskListResponse(data=tasks, count=len(tasks))


@router.post("/api/tasks", response_model=TaskResponse, status_code=201)
def create_task(
    task: TaskCreate,
    repo: TaskRepo = Depends(get_repo),
):
    """
    Create a task. Title is required and trimmed; description is optional.
    """
    try:
        created = repo.create_task(task)
    except ValidationError as e:
        return _error_response(e, 400)
    except StorageError as e:
        return _storage_failure(e, "create task")
    return TaskResponse(data=created, message="Task created")


@router.get("/api/tasks/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: int,
    repo: TaskRepo = Depends(get_repo),
):
    try:
        return TaskResponse(data=repo.get_task(task_id))
    except NotFoundError as e:
        return _error_response(e, 404)
    except StorageError as e:
        return _storage_failure(e, "get task")


@router.api_route("/api/tasks/{task_id}", methods=["PUT", "PATCH"], response_model=TaskResponse)
def update_task(
    task_id: int,
    patch: TaskUpdate = Body(...),
    repo: TaskRepo = Depends(get_repo),
):
    """
    Partial update: only the fields present in the body are changed.
    PUT and PATCH behave the same.
    """
    try:
        updated = repo.update_task(task_id, patch)
    except ValidationError as e:
        return _error_response(e, 400)
    except NotFoundError as e:
        return _error_response(e, 404)
    except StorageError as e:
        return _storage_failure(e, "update task")
    return TaskResponse(data=updated, message="Task updated")


@router.delete("/api/tasks/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: int,
    repo: TaskRepo = Depends(get_repo),
):
    try:
        repo.delete_task(task_id)
    except NotFoundError as e:
        return _error_response(e, 404)
    except StorageError as e:
        return _storage_failure(e, "delete task")
    return MessageResponse(message="Task deleted")
