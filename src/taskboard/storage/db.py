# src/taskboard/storage/db.py
from __future__ import annotations

import sqlite3
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from taskboard.config import load_settings
from taskboard.domain.errors import StorageError
from taskboard.logging import get_logger

from .schema import apply_schema

_LOG = get_logger(__name__)


@dataclass(frozen=True)
class SQLiteDB:
    """
    SQLite connection factory.

    Notes:
    - The connection is shared by every request thread, so check_same_thread
      is off; callers hold store_lock() around each statement sequence.
    - Pragmas are applied on every connection.
    """
    db_path: Path
    timeout_s: float = 5.0

    def connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(
            str(self.db_path),
            timeout=self.timeout_s,
            isolation_level=None,          # autocommit; one statement per write
            check_same_thread=False,       # shared across FastAPI worker threads
        )
        conn.row_factory = sqlite3.Row
        try:
            self._apply_pragmas(conn)
        except sqlite3.Error:
            conn.close()
            raise
        return conn

    def _apply_pragmas(self, conn: sqlite3.Connection) -> None:
        cur = conn.cursor()
        # Readers don't block the writer
        cur.execute("PRAGMA journal_mode=WAL;")
        # Enforce FK constraints
        cur.execute("PRAGMA foreign_keys=ON;")
        # Reduce spurious 'database is locked'
        cur.execute(f"PRAGMA busy_timeout={int(self.timeout_s * 1000)};")
        cur.close()


# Process-wide store handle. Guarded by _STORE_LOCK for initialization/teardown.
_STORE: Optional[sqlite3.Connection] = None
_STORE_PATH: Optional[Path] = None
_STORE_LOCK = threading.Lock()

# Serializes statement sequences on the shared connection (lastrowid, re-reads).
_IO_LOCK = threading.RLock()


def store_lock() -> threading.RLock:
    """
    Lock to hold around every statement sequence run on the shared handle.
    """
    return _IO_LOCK


def acquire_store(db_path: Optional[Path] = None, *, timeout_s: float = 5.0) -> sqlite3.Connection:
    """
    Returns the process-wide SQLite connection, opening it on first use.

    First call (or first call after release_store):
    - resolves the path (argument, else TASKBOARD_DB_PATH / default; the
      busy timeout then also comes from settings)
    - creates the containing directory
    - opens the file, enables foreign keys, creates table + index

    Later calls return the same connection untouched; `db_path` is ignored once
    a handle exists. Racing first callers initialize exactly once.

    Raises StorageError if the directory, file or schema cannot be set up.
    Nothing is cached on failure.
    """
    global _STORE, _STORE_PATH

    store = _STORE
    if store is not None:
        return store

    with _STORE_LOCK:
        if _STORE is not None:
            return _STORE

        if db_path is not None:
            path = Path(db_path)
        else:
            settings = load_settings()
            path, timeout_s = settings.db_path, settings.db_timeout_s

        try:
            conn = SQLiteDB(path, timeout_s=timeout_s).connect()
        except (OSError, sqlite3.Error) as e:
            _LOG.exception("Failed to open task store at %s", path)
            raise StorageError(
                "Failed to open task store",
                details={"path": str(path)},
            ) from e

        try:
            apply_schema(conn)
        except sqlite3.Error as e:
            conn.close()
            _LOG.exception("Failed to initialize schema at %s", path)
            raise StorageError(
                "Failed to initialize task store schema",
                details={"path": str(path)},
            ) from e

        _STORE = conn
        _STORE_PATH = path
        _LOG.info("Task store opened at %s", path)
        return conn


def release_store() -> None:
    """
    Closes the process-wide connection and forgets it. No-op if none is open.
    """
    global _STORE, _STORE_PATH

    with _STORE_LOCK, _IO_LOCK:
        if _STORE is None:
            return
        conn, path = _STORE, _STORE_PATH
        _STORE = None
        _STORE_PATH = None
        conn.close()
        _LOG.info("Task store closed (%s)", path)


def store_is_open() -> bool:
    return _STORE is not None
