"""
Runtime configuration, read from the environment.
"""
from __future__ import annotations

import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent

# SQLite entity store location; persistence.db.set_db_path() overrides at runtime
DB_PATH = Path(os.environ.get("LEAGUEGEN_DB_PATH", str(PROJECT_ROOT / "data" / "leaguegen.db")))

LOG_LEVEL = os.environ.get("LEAGUEGEN_LOG_LEVEL", "INFO")

# Fewest clubs a generated season may have
MIN_CLUBS = int(os.environ.get("LEAGUEGEN_MIN_CLUBS", "4"))
