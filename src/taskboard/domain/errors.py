# src/taskboard/domain/errors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class TaskboardError(Exception):
    """
    Base domain error.

    The API layer maps each subclass to one HTTP status.
    """
    message: str
    code: str = "TASKBOARD_ERROR"
    details: Optional[dict[str, Any]] = None

    def __str__(self) -> str:
        return self.message


@dataclass
class ValidationError(TaskboardError):
    """Caller input violates a precondition. Raised before the store is touched."""
    code: str = "VALIDATION_ERROR"


@dataclass
class NotFoundError(TaskboardError):
    code: str = "NOT_FOUND"


@dataclass
class StorageError(TaskboardError):
    """
    The store could not be opened or a statement failed.

    The original sqlite3/OS exception is chained as __cause__; callers should
    not expose `message` details beyond the generic text to end users.
    """
    code: str = "STORAGE_ERROR"
