"""
Season simulation engine: club strength, match results, double round-robin
standings with tie-breaks and promotion/relegation. Deterministic given a seed.
"""
from .schemas import (
    ClubInput,
    ClubStrength,
    Fixture,
    MatchOutcome,
    MatchResult,
    SeasonConfig,
    SeasonSimulation,
    StandingRow,
    StandingStatus,
)
from .rng import SeededRNG, default_rng
from .strength import calculate_club_strength, clamp_strength
from .match_engine import MatchProbabilities, match_probabilities, generate_match_result
from .scheduling import round_robin_pairings, double_round_robin
from .table_builder import (
    SeasonTableBuilder,
    build_season_table,
    rank_standings,
    assign_statuses,
    status_for_position,
)
from .persistence import (
    SeasonSummary,
    summarize_season,
    simulation_to_dict,
    standing_row_to_dict,
    fixture_to_dict,
    export_season,
)

__all__ = [
    "ClubInput",
    "ClubStrength",
    "Fixture",
    "MatchOutcome",
    "MatchResult",
    "SeasonConfig",
    "SeasonSimulation",
    "StandingRow",
    "StandingStatus",
    "SeededRNG",
    "default_rng",
    "calculate_club_strength",
    "clamp_strength",
    "MatchProbabilities",
    "match_probabilities",
    "generate_match_result",
    "round_robin_pairings",
    "double_round_robin",
    "SeasonTableBuilder",
    "build_season_table",
    "rank_standings",
    "assign_statuses",
    "status_for_position",
    "SeasonSummary",
    "summarize_season",
    "simulation_to_dict",
    "standing_row_to_dict",
    "fixture_to_dict",
    "export_season",
]
