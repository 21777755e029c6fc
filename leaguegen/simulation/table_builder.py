"""
Season Table Builder: full double round-robin among N clubs, aggregated into
ranked, classified standings.

Pure function of (clubs, config, previous positions, rng). Strengths are drawn
once per club, in input order, before any fixture is played; fixtures are then
played in schedule order. With a seeded rng the whole table is reproducible.
"""
from __future__ import annotations

from typing import Mapping, Sequence

from .match_engine import generate_match_result
from .rng import SeededRNG, default_rng
from .scheduling import double_round_robin
from .schemas import (
    ClubInput,
    ClubStrength,
    Fixture,
    SeasonConfig,
    SeasonSimulation,
    StandingRow,
    StandingStatus,
)
from .strength import calculate_club_strength


def standing_sort_key(row: StandingRow) -> tuple[int, int, int, str]:
    """Points, goal difference, goals for (all descending), then club id for a total order."""
    return (-row.points, -row.goal_difference, -row.goals_for, row.club_id)


def rank_standings(rows: Sequence[StandingRow]) -> list[StandingRow]:
    """Sort rows and assign 1-based positions."""
    ranked = sorted(rows, key=standing_sort_key)
    for index, row in enumerate(ranked, start=1):
        row.position = index
    return ranked


def status_for_position(position: int, num_clubs: int, config: SeasonConfig) -> StandingStatus:
    """
    rank 1 -> champion; ranks 2..1+promotion_spots -> promoted (tier > 1 only);
    bottom relegation_spots -> relegated. Champion and promoted win over relegated.
    """
    if position == 1:
        return StandingStatus.CHAMPION
    if config.tier > 1 and position <= 1 + config.promotion_spots:
        return StandingStatus.PROMOTED
    if position > num_clubs - config.relegation_spots:
        return StandingStatus.RELEGATED
    return StandingStatus.NONE


def assign_statuses(ranked: Sequence[StandingRow], config: SeasonConfig) -> None:
    n = len(ranked)
    for row in ranked:
        row.status = status_for_position(row.position, n, config)


class SeasonTableBuilder:
    """
    Runs one season. Holds the rng and configuration; build() may be called
    again for a "regenerate" with the rng continuing from where it stopped.
    """

    def __init__(self, config: SeasonConfig | None = None, rng: SeededRNG | None = None) -> None:
        self.config = config or SeasonConfig()
        self.rng = rng or default_rng()

    def compute_strengths(
        self,
        clubs: Sequence[ClubInput],
        previous_positions: Mapping[str, int],
    ) -> list[ClubStrength]:
        strengths: list[ClubStrength] = []
        for club in clubs:
            prev = previous_positions.get(club.id)
            value = calculate_club_strength(club, prev, self.config.tier, self.rng)
            strengths.append(ClubStrength(club_id=club.id, strength=value, previous_position=prev))
        return strengths

    def play_fixtures(
        self,
        club_ids: list[str],
        strength_by_id: Mapping[str, float],
    ) -> list[Fixture]:
        fixtures: list[Fixture] = []
        for round_number, home_id, away_id in double_round_robin(club_ids):
            result = generate_match_result(strength_by_id[home_id], strength_by_id[away_id], self.rng)
            fixtures.append(Fixture(round_number, home_id, away_id, result))
        return fixtures

    def build(
        self,
        clubs: Sequence[ClubInput],
        previous_positions: Mapping[str, int] | None = None,
    ) -> SeasonSimulation:
        club_ids = [c.id for c in clubs]
        if len(set(club_ids)) != len(club_ids):
            raise ValueError("Each club may appear only once in a season")
        strengths = self.compute_strengths(clubs, previous_positions or {})
        strength_by_id = {s.club_id: s.strength for s in strengths}

        fixtures = self.play_fixtures(club_ids, strength_by_id)

        rows = {
            c.id: StandingRow(club_id=c.id, club_name=c.name, strength=strength_by_id[c.id])
            for c in clubs
        }
        for fx in fixtures:
            rows[fx.home_club_id].record(fx.result.home_goals, fx.result.away_goals)
            rows[fx.away_club_id].record(fx.result.away_goals, fx.result.home_goals)

        ranked = rank_standings(list(rows.values()))
        assign_statuses(ranked, self.config)
        return SeasonSimulation(
            config=self.config,
            strengths=strengths,
            fixtures=fixtures,
            standings=ranked,
            seed=self.rng.seed,
        )


def build_season_table(
    clubs: Sequence[ClubInput],
    config: SeasonConfig | None = None,
    previous_positions: Mapping[str, int] | None = None,
    rng: SeededRNG | None = None,
) -> SeasonSimulation:
    """One-shot convenience wrapper around SeasonTableBuilder."""
    return SeasonTableBuilder(config, rng).build(clubs, previous_positions)
