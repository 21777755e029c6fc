"""
Shared value types for the season simulator.
Inputs (club counters, league configuration) and outputs (fixtures, standings).
Nothing here is persisted directly; see simulation.persistence for dict forms.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

DEFAULT_PROMOTION_SPOTS = 2
DEFAULT_RELEGATION_SPOTS = 3


class MatchOutcome(str, Enum):
    """Outcome category drawn before the scoreline."""
    HOME_WIN = "home_win"
    DRAW = "draw"
    AWAY_WIN = "away_win"


class StandingStatus(str, Enum):
    """Classification attached to a standing row. NONE is mid-table."""
    CHAMPION = "champion"
    PROMOTED = "promoted"
    RELEGATED = "relegated"
    NONE = ""


@dataclass
class SeasonConfig:
    """
    League configuration for one simulated season.
    tier 1 is the top flight; promotion is only awarded below it.
    None spots fall back to the league defaults (2 up, 3 down).
    """
    tier: int = 1
    promotion_spots: int | None = DEFAULT_PROMOTION_SPOTS
    relegation_spots: int | None = DEFAULT_RELEGATION_SPOTS

    def __post_init__(self) -> None:
        if self.tier is None:
            self.tier = 1
        if self.promotion_spots is None:
            self.promotion_spots = DEFAULT_PROMOTION_SPOTS
        if self.relegation_spots is None:
            self.relegation_spots = DEFAULT_RELEGATION_SPOTS
        if self.tier < 1:
            raise ValueError(f"tier must be >= 1 (got {self.tier})")
        if self.promotion_spots < 0:
            raise ValueError(f"promotion_spots must be >= 0 (got {self.promotion_spots})")
        if self.relegation_spots < 0:
            raise ValueError(f"relegation_spots must be >= 0 (got {self.relegation_spots})")

    def overlaps(self, num_clubs: int) -> bool:
        """True when champion/promotion places and relegation places can meet in an N-club table."""
        top = 1 + (self.promotion_spots if self.tier > 1 else 0)
        return top + self.relegation_spots > num_clubs


@dataclass(frozen=True)
class ClubInput:
    """Club fields the strength model reads. Counters default to zero."""
    id: str
    name: str
    stability_points: int = 0
    league_titles: int = 0
    promotions: int = 0
    relegations: int = 0
    vcc_titles: int = 0
    ccc_titles: int = 0

    @classmethod
    def from_club(cls, club: Any) -> ClubInput:
        """Build from any record exposing the same attribute names (e.g. models.Club)."""
        return cls(
            id=club.id,
            name=club.name,
            stability_points=club.stability_points or 0,
            league_titles=club.league_titles or 0,
            promotions=club.promotions or 0,
            relegations=club.relegations or 0,
            vcc_titles=club.vcc_titles or 0,
            ccc_titles=club.ccc_titles or 0,
        )


@dataclass(frozen=True)
class ClubStrength:
    """Per-season strength of one club. Fixed for every fixture of the run."""
    club_id: str
    strength: float
    previous_position: int | None = None


@dataclass(frozen=True)
class MatchResult:
    """Scoreline for one fixture, consistent with its outcome category."""
    home_goals: int
    away_goals: int
    outcome: MatchOutcome


@dataclass(frozen=True)
class Fixture:
    """One simulated fixture of the double round-robin."""
    round_number: int
    home_club_id: str
    away_club_id: str
    result: MatchResult


@dataclass
class StandingRow:
    """One club's aggregated season record and final classification."""
    club_id: str
    club_name: str
    strength: float = 0.0
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0
    points: int = 0
    position: int = 0  # 1-based, set after ranking
    status: StandingStatus = StandingStatus.NONE

    @property
    def goal_difference(self) -> int:
        return self.goals_for - self.goals_against

    def record(self, scored: int, conceded: int) -> None:
        """Add one fixture from this club's point of view."""
        self.played += 1
        self.goals_for += scored
        self.goals_against += conceded
        if scored > conceded:
            self.won += 1
            self.points += 3
        elif scored < conceded:
            self.lost += 1
        else:
            self.drawn += 1
            self.points += 1


@dataclass
class SeasonSimulation:
    """Result of one run of the table builder."""
    config: SeasonConfig
    strengths: list[ClubStrength]
    fixtures: list[Fixture]
    standings: list[StandingRow]
    seed: int | None = None

    def with_status(self, status: StandingStatus) -> list[StandingRow]:
        return [r for r in self.standings if r.status == status]

    @property
    def champion(self) -> StandingRow | None:
        return self.standings[0] if self.standings else None
