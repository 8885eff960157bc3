# src/taskboard/api/app.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from taskboard.config import load_settings
from taskboard.logging import configure_logging, get_logger
from taskboard.storage import release_store

from .routes import router

_LOG = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Lifespan handler.

    Responsible for:
    - loading settings
    - configuring logging
    - closing the task store on shutdown

    The store is opened lazily by the first request that touches it.
    """
    settings = load_settings()
    configure_logging(settings.log_level)

    # Store on app.state for DI
    app.state.settings = settings

    _LOG.info("Startup complete (db=%s).", settings.db_path)

    try:
        yield
    finally:
        release_store()
        _LOG.info("Shutdown complete.")


app = FastAPI(
    title="Taskboard",
    version="0.1.0",
    lifespan=lifespan,
)
app.include_router(router)
