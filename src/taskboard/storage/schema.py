# src/taskboard/storage/schema.py
from __future__ import annotations

import sqlite3

from taskboard.logging import get_logger

_LOG = get_logger(__name__)

# Millisecond, fixed-width UTC timestamp; lexical order == chronological order.
NOW_SQL = "strftime('%Y-%m-%d %H:%M:%f', 'now')"

# At least 1 ms past the stored updated_at (and so past created_at), even when
# the write lands in the same millisecond or the clock steps back.
NEXT_UPDATED_AT_SQL = (
    f"MAX({NOW_SQL}, "
    "strftime('%Y-%m-%d %H:%M:%f', julianday(updated_at) + 0.001 / 86400.0))"
)

SCHEMA_STATEMENTS: tuple[str, ...] = (
    f"""
    CREATE TABLE IF NOT EXISTS tasks (
      id INTEGER PRIMARY KEY AUTOINCREMENT,
      title TEXT NOT NULL,
      description TEXT,
      completed INTEGER NOT NULL DEFAULT 0,
      created_at TEXT NOT NULL DEFAULT ({NOW_SQL}),
      updated_at TEXT NOT NULL DEFAULT ({NOW_SQL})
    );
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_tasks_completed
    ON tasks(completed);
    """,
)


def apply_schema(conn: sqlite3.Connection) -> None:
    """
    Creates the `tasks` table and its `completed` index if they are missing.

    Safe to run on every process start; existing data is never touched.
    """
    for stmt in SCHEMA_STATEMENTS:
        conn.execute(stmt)
    _LOG.debug("Schema ensured (%d statement(s)).", len(SCHEMA_STATEMENTS))
