"""Logging setup shared by the API lifespan, the CLI and the demo script."""

from __future__ import annotations

import logging

from leaguegen import config

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def configure_logging(*, level: str | None = None, include_uvicorn: bool = True) -> logging.Logger:
    """
    Install the root handler and set the ``leaguegen`` logger level.

    level defaults to LEAGUEGEN_LOG_LEVEL. The CLI passes include_uvicorn=False
    since no server runs there. Returns the ``leaguegen`` logger.
    """
    resolved = (level or config.LOG_LEVEL or "INFO").upper()
    logging.basicConfig(level=resolved, format=LOG_FORMAT, datefmt=LOG_DATEFMT)

    app_logger = logging.getLogger("leaguegen")
    app_logger.setLevel(resolved)
    if include_uvicorn:
        for name in _UVICORN_LOGGERS:
            logging.getLogger(name).setLevel(resolved)
    return app_logger
