"""
Tests for logging setup.
"""
from __future__ import annotations

import logging
from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from leaguegen.logging_config import configure_logging


@pytest.fixture
def restore_levels():
    names = ("leaguegen", "uvicorn", "uvicorn.error", "uvicorn.access")
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


def test_explicit_level_applies_to_app_logger(restore_levels):
    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logger = configure_logging(level="debug", include_uvicorn=False)
    assert logger.name == "leaguegen"
    assert logger.level == logging.DEBUG
    # CLI mode leaves server loggers alone
    assert logging.getLogger("uvicorn").level == logging.WARNING


def test_uvicorn_loggers_follow_app_level(restore_levels):
    configure_logging(level="ERROR")
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        assert logging.getLogger(name).level == logging.ERROR
