# src/taskboard/api/__init__.py
"""
API layer for taskboard (FastAPI).

- app: FastAPI instance + lifecycle hooks
- routes: REST endpoints under /api/tasks
- deps: dependency injection helpers
"""

from .app import app

__all__ = ["app"]
