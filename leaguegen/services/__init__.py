"""
Service layer: season generation over the entity store.
The simulator itself lives in leaguegen.simulation and never touches persistence.
"""
from .season_service import (
    SeasonGenerationService,
    GeneratedSeason,
    SaveReport,
    ClubStatsSyncReport,
    SeasonGenerationError,
    SeasonAlreadyExistsError,
    LeagueNotFoundError,
    ClubNotFoundError,
    InsufficientClubsError,
)

__all__ = [
    "SeasonGenerationService",
    "GeneratedSeason",
    "SaveReport",
    "ClubStatsSyncReport",
    "SeasonGenerationError",
    "SeasonAlreadyExistsError",
    "LeagueNotFoundError",
    "ClubNotFoundError",
    "InsufficientClubsError",
]
