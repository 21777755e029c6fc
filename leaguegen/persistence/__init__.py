"""
Persistence layer (entity store) for nations, clubs, leagues, seasons and tables.
Read/write interfaces only. No business logic and no simulation.
"""
from .db import get_connection, init_db, set_db_path, get_db_path
from .repositories import (
    NationRepository,
    ClubRepository,
    LeagueRepository,
    SeasonRepository,
    LeagueTableRepository,
    MatchRepository,
)

__all__ = [
    "get_connection",
    "init_db",
    "set_db_path",
    "get_db_path",
    "NationRepository",
    "ClubRepository",
    "LeagueRepository",
    "SeasonRepository",
    "LeagueTableRepository",
    "MatchRepository",
]
