# src/taskboard/storage/__init__.py
"""
Storage layer for taskboard (SQLite).

- db: connection factory + process-wide store handle
- schema: idempotent table/index creation
- repo: task data access operations
"""

from .db import SQLiteDB, acquire_store, release_store, store_is_open, store_lock
from .schema import apply_schema
from .repo import TaskRepo

__all__ = ["SQLiteDB", "acquire_store", "release_store", "store_is_open", "store_lock", "apply_schema", "TaskRepo"]
