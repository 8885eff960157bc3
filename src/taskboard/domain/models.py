from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class TaskCreate(BaseModel):
    """
    API input model for creating a task.

    `title` is optional at the model level so a missing or blank title is
    rejected by the repository as a VALIDATION_ERROR (400), not by pydantic.
    """
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None


class TaskUpdate(BaseModel):
    """
    Sparse update payload.

    Only fields the caller actually sent are applied; presence is read from
    `model_fields_set`, so an explicit `"description": null` clears the
    description while an omitted one leaves it alone.
    """
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None

    def present_fields(self) -> set[str]:
        return set(self.model_fields_set) & {"title", "description", "completed"}


class TaskFilter(BaseModel):
    model_config = ConfigDict(extra="forbid")

    completed: Optional[bool] = None


class TaskView(BaseModel):
    """
    API output model for a single task, as persisted.
    """
    model_config = ConfigDict(extra="forbid")

    id: int
    title: str
    description: Optional[str] = None
    completed: bool
    created_at: str
    updated_at: str


class TaskResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    success: bool = True
    data: TaskView
    message: Optional[str] = None


class TaskListResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    success: bool = True
    data: list[TaskView]
    count: int


class MessageResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    success: bool = False
    error: str
    code: str
    details: dict[str, Any] = Field(default_factory=dict)
