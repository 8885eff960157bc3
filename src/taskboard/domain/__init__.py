"""
Domain layer for taskboard.

- models: Pydantic models for API input/output
- errors: domain-level exceptions
"""

from .models import (
    ErrorResponse,
    MessageResponse,
    TaskCreate,
    TaskFilter,
    TaskListResponse,
    TaskResponse,
    TaskUpdate,
    TaskView,
)
from .errors import (
    TaskboardError,
    ValidationError,
    NotFoundError,
    StorageError,
)

__all__ = [
    "TaskCreate",
    "TaskUpdate",
    "TaskFilter",
    "TaskView",
    "TaskResponse",
    "TaskListResponse",
    "MessageResponse",
    "ErrorResponse",
    "TaskboardError",
    "ValidationError",
    "NotFoundError",
    "StorageError",
]
