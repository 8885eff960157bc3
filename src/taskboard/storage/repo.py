# src/taskboard/storage/repo.py
from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Optional

from taskboard.domain.errors import NotFoundError, StorageError, ValidationError
from taskboard.domain.models import TaskCreate, TaskFilter, TaskUpdate, TaskView
from taskboard.logging import get_logger

from .db import acquire_store, store_lock
from .schema import NEXT_UPDATED_AT_SQL, NOW_SQL

_LOG = get_logger(__name__)

_COLUMNS = "id, title, description, completed, created_at, updated_at"


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    """Re-raises sqlite3 failures as StorageError, keeping the cause."""
    try:
        yield
    except sqlite3.Error as e:
        _LOG.exception("Storage failure during %s", operation)
        raise StorageError(
            f"Storage failure during {operation}",
            details={"operation": operation},
        ) from e


def _clean_title(raw: Optional[str]) -> str:
    title = raw.strip() if isinstance(raw, str) else ""
    if not title:
        raise ValidationError("title must not be empty", details={"field": "title"})
    return title


def _clean_description(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    return raw.strip() or None


def _row_to_view(row: sqlite3.Row) -> TaskView:
    return TaskView(
        id=row["id"],
        title=row["title"],
        description=row["description"],
        completed=bool(row["completed"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


@dataclass
class TaskRepo:
    """
    Repository encapsulating all SQL access to `tasks`.

    Important invariants:
    - Input is validated before the store is acquired; invalid input never
      produces a write.
    - Every create/update/delete is one write statement on the shared connection.
    - Each operation holds the store lock for its whole statement sequence, so
      the re-read after a write sees this caller's row.
    - Concurrent updates to the same row are last-writer-wins.
    """
    db_path: Optional[Path] = None
    timeout_s: float = 5.0

    @contextmanager
    def _session(self, operation: str) -> Iterator[sqlite3.Connection]:
        conn = acquire_store(self.db_path, timeout_s=self.timeout_s)
        with store_lock(), _storage_errors(operation):
            yield conn

    # -------------------------
    # Read operations
    # -------------------------

    def get_task(self, task_id: int) -> TaskView:
        with self._session("get") as conn:
            row = self._fetch_row(conn, task_id)
        if row is None:
            raise NotFoundError(f"Task not found: {task_id}", details={"id": task_id})
        return _row_to_view(row)

    def list_tasks(self, task_filter: Optional[TaskFilter] = None) -> list[TaskView]:
        """
        Newest first. Ties on created_at fall back to id DESC so the order is
        stable across calls.
        """
        where, params = self._filter_clause(task_filter)
        with self._session("list") as conn:
            rows = conn.execute(
                f"""
                SELECT {_COLUMNS}
                FROM tasks
                {where}
                ORDER BY created_at DESC, id DESC;
                """,
                params,
            ).fetchall()
        return [_row_to_view(r) for r in rows]

    def count_tasks(self, task_filter: Optional[TaskFilter] = None) -> int:
        where, params = self._filter_clause(task_filter)
        with self._session("count") as conn:
            row = conn.execute(f"SELECT COUNT(*) AS c FROM tasks {where};", params).fetchone()
        return int(row["c"])

    # -------------------------
    # Write operations
    # -------------------------

    def create_task(self, task: TaskCreate) -> TaskView:
        """
        Inserts a task and returns the row as stored.

        - title is trimmed and must not be empty
        - description is trimmed; empty or missing is stored as NULL
        - completed=0, created_at == updated_at (same statement clock)
        """
        title = _clean_title(task.title)
        description = _clean_description(task.description)

        with self._session("create") as conn:
            cur = conn.execute(
                f"""
                INSERT INTO tasks(title, description, completed, created_at, updated_at)
                VALUES (?, ?, 0, {NOW_SQL}, {NOW_SQL});
                """,
                (title, description),
            )
            task_id = cur.lastrowid
            row = self._fetch_row(conn, task_id)

        _LOG.info("Created task %s", task_id)
        return _row_to_view(row)

    def update_task(self, task_id: int, patch: TaskUpdate) -> TaskView:
        """
        Applies only the fields present in `patch` in a single UPDATE and
        moves updated_at forward.

        Raises ValidationError for an empty patch or blank title, and
        NotFoundError when the row does not exist.
        """
        assignments, params = self._patch_assignments(patch)
        assignments.append(f"updated_at = {NEXT_UPDATED_AT_SQL}")

        with self._session("update") as conn:
            if self._fetch_row(conn, task_id, columns="id") is None:
                raise NotFoundError(f"Task not found: {task_id}", details={"id": task_id})

            conn.execute(
                f"UPDATE tasks SET {', '.join(assignments)} WHERE id = ?;",
                (*params, task_id),
            )
            row = self._fetch_row(conn, task_id)

        _LOG.info("Updated task %s fields=%s", task_id, sorted(patch.present_fields()))
        return _row_to_view(row)

    def delete_task(self, task_id: int) -> None:
        """
        Hard delete. A second delete of the same id raises NotFoundError again.
        """
        with self._session("delete") as conn:
            if self._fetch_row(conn, task_id, columns="id") is None:
                raise NotFoundError(f"Task not found: {task_id}", details={"id": task_id})

            conn.execute("DELETE FROM tasks WHERE id = ?;", (task_id,))

        _LOG.info("Deleted task %s", task_id)

    # -------------------------
    # Helpers
    # -------------------------

    @staticmethod
    def _fetch_row(
        conn: sqlite3.Connection,
        task_id: Optional[int],
        columns: str = _COLUMNS,
    ) -> Optional[sqlite3.Row]:
        return conn.execute(
            f"SELECT {columns} FROM tasks WHERE id = ?;",
            (task_id,),
        ).fetchone()

    @staticmethod
    def _filter_clause(task_filter: Optional[TaskFilter]) -> tuple[str, tuple[Any, ...]]:
        if task_filter is None or task_filter.completed is None:
            return "", ()
        return "WHERE completed = ?", (1 if task_filter.completed else 0,)

    @staticmethod
    def _patch_assignments(patch: TaskUpdate) -> tuple[list[str], list[Any]]:
        """
        Builds the SET clause from the fields present in the patch.

        Presence, not truthiness: `completed=False` and `description=""` are
        both real changes.
        """
        present = patch.present_fields()
        if not present:
            raise ValidationError(
                "No fields to update",
                details={"allowed": ["title", "description", "completed"]},
            )

        assignments: list[str] = []
        params: list[Any] = []

        if "title" in present:
            assignments.append("title = ?")
            params.append(_clean_title(patch.title))

        if "description" in present:
            assignments.append("description = ?")
            params.append(_clean_description(patch.description))

        if "completed" in present:
            if patch.completed is None:
                raise ValidationError(
                    "completed must be a boolean",
                    details={"field": "completed"},
                )
            assignments.append("completed = ?")
            params.append(1 if patch.completed else 0)

        return assignments, params
