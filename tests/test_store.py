# tests/test_store.py
import sqlite3
import threading
from pathlib import Path

import pytest

from taskboard.domain.errors import StorageError
from taskboard.storage import SQLiteDB, acquire_store, release_store, store_is_open
from taskboard.storage import db as db_module


def test_acquire_creates_directory_file_and_schema(db_path: Path):
    assert not db_path.parent.exists()

    conn = acquire_store(db_path)

    assert db_path.exists()
    tables = {r["name"] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table';")}
    assert "tasks" in tables
    indexes = {r["name"] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='index';")}
    assert "idx_tasks_completed" in indexes
    assert conn.execute("PRAGMA foreign_keys;").fetchone()[0] == 1


def test_acquire_returns_same_handle_until_released(db_path: Path, tmp_path: Path):
    first = acquire_store(db_path)
    # Path is ignored once a handle exists.
    second = acquire_store(tmp_path / "other" / "ignored.db")
    assert first is second
    assert not (tmp_path / "other").exists()

    release_store()
    assert not store_is_open()

    third = acquire_store(db_path)
    assert third is not first


def test_release_without_handle_is_noop():
    release_store()
    release_store()
    assert not store_is_open()


def test_schema_is_idempotent_and_keeps_data(db_path: Path):
    conn = acquire_store(db_path)
    conn.execute("INSERT INTO tasks(title) VALUES ('kept');")
    release_store()

    conn = acquire_store(db_path)
    rows = conn.execute("SELECT title, completed, created_at, updated_at FROM tasks;").fetchall()
    assert len(rows) == 1
    assert rows[0]["title"] == "kept"
    assert rows[0]["completed"] == 0
    assert rows[0]["created_at"] is not None
    assert rows[0]["updated_at"] is not None


def test_concurrent_first_acquire_initializes_once(db_path: Path, monkeypatch: pytest.MonkeyPatch):
    calls = []
    real_connect = SQLiteDB.connect

    def counting_connect(self):
        calls.append(self.db_path)
        return real_connect(self)

    monkeypatch.setattr(SQLiteDB, "connect", counting_connect)

    n = 8
    barrier = threading.Barrier(n)
    results: list[sqlite3.Connection] = []
    lock = threading.Lock()

    def worker():
        barrier.wait()
        conn = acquire_store(db_path)
        with lock:
            results.append(conn)

    threads = [threading.Thread(target=worker) for _ in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5.0)

    assert len(results) == n
    assert all(r is results[0] for r in results)
    assert len(calls) == 1


def test_acquire_uses_configured_path_by_default(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    path = tmp_path / "env" / "tasks.db"
    monkeypatch.setenv("TASKBOARD_DB_PATH", str(path))

    acquire_store()

    assert path.exists()


def test_open_failure_raises_storage_error_and_caches_nothing(tmp_path: Path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")

    with pytest.raises(StorageError) as exc_info:
        acquire_store(blocker / "database.db")

    assert exc_info.value.code == "STORAGE_ERROR"
    assert isinstance(exc_info.value.__cause__, OSError)
    assert not store_is_open()


def test_module_state_cleared_on_release(db_path: Path):
    acquire_store(db_path)
    assert db_module._STORE_PATH == db_path

    release_store()
    assert db_module._STORE is None
    assert db_module._STORE_PATH is None
