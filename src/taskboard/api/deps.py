# src/taskboard/api/deps.py
from __future__ import annotations

from fastapi import Depends, Request

from taskboard.config import Settings
from taskboard.storage import TaskRepo


def get_settings(request: Request) -> Settings:
    """
    Per-request access to settings stored on app.state during startup.
    """
    return request.app.state.settings  # type: ignore[attr-defined]


def get_repo(settings: Settings = Depends(get_settings)) -> TaskRepo:
    """
    Provides a TaskRepo over the process-wide store. The store itself is
    opened by the repository on first use.
    """
    return TaskRepo(db_path=settings.db_path, timeout_s=settings.db_timeout_s)
