from __future__ import annotations

import uvicorn

from taskboard.config import load_settings
from taskboard.logging import configure_logging, get_logger

_LOG = get_logger(__name__)


def main() -> int:
    """
    Serves the API with uvicorn using TASKBOARD_* settings.

    For development prefer:
      uvicorn taskboard.api.app:app --reload
    """
    settings = load_settings()
    configure_logging(settings.log_level)
    _LOG.info("Serving taskboard on %s:%d (db=%s)", settings.host, settings.port, settings.db_path)

    uvicorn.run(
        "taskboard.api.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
