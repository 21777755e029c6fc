"""
Data models for the entity store.
Domain records only; no persistence or API logic.

Nations own leagues and clubs; leagues own seasons; a season owns one
league-table row per participating club and, optionally, its fixtures.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


# ---------- Club stability ----------
class StabilityStatus(str, Enum):
    """Financial health band derived from stability points."""
    THRIVING = "thriving"
    STABLE = "stable"
    STRUGGLING = "struggling"
    AT_RISK = "at_risk"
    FOLDED = "folded"


def stability_status(points: int | None) -> StabilityStatus:
    points = points or 0
    if points >= 25:
        return StabilityStatus.THRIVING
    if points >= 15:
        return StabilityStatus.STABLE
    if points >= 5:
        return StabilityStatus.STRUGGLING
    if points >= -4:
        return StabilityStatus.AT_RISK
    return StabilityStatus.FOLDED


# ---------- Nation ----------
@dataclass
class Nation:
    id: str
    name: str
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "created_at": self.created_at.isoformat()}


# ---------- Club ----------
@dataclass
class Club:
    """
    A club in the universe. Historical counters feed the strength model.
    is_defunct / is_former_name clubs are kept for history but never selected
    for a new season unless they are still listed in the league.
    """
    id: str
    name: str
    nation_id: str
    created_at: datetime
    league_id: str | None = None
    stability_points: int = 0
    league_titles: int = 0
    promotions: int = 0
    relegations: int = 0
    vcc_titles: int = 0
    ccc_titles: int = 0
    is_defunct: bool = False
    is_former_name: bool = False

    @property
    def stability_status(self) -> StabilityStatus:
        return stability_status(self.stability_points)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "nation_id": self.nation_id,
            "league_id": self.league_id,
            "stability_points": self.stability_points,
            "stability_status": self.stability_status.value,
            "league_titles": self.league_titles,
            "promotions": self.promotions,
            "relegations": self.relegations,
            "vcc_titles": self.vcc_titles,
            "ccc_titles": self.ccc_titles,
            "is_defunct": self.is_defunct,
            "is_former_name": self.is_former_name,
            "created_at": self.created_at.isoformat(),
        }


# ---------- League ----------
@dataclass
class League:
    """A division in a nation's pyramid. tier 1 = top flight."""
    id: str
    name: str
    nation_id: str
    tier: int
    promotion_spots: int
    relegation_spots: int
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "nation_id": self.nation_id,
            "tier": self.tier,
            "promotion_spots": self.promotion_spots,
            "relegation_spots": self.relegation_spots,
            "created_at": self.created_at.isoformat(),
        }


# ---------- Season ----------
@dataclass
class Season:
    """
    One completed (generated) season of a league. Summary fields are
    denormalized club names for display; the table lives in league_tables.
    """
    id: str
    league_id: str
    year: str
    number_of_teams: int
    created_at: datetime
    champion_id: str | None = None
    champion_name: str | None = None
    runner_up: str | None = None
    promoted_teams: str = ""
    relegated_teams: str = ""
    promotion_spots: int | None = None
    relegation_spots: int | None = None
    seed: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "league_id": self.league_id,
            "year": self.year,
            "number_of_teams": self.number_of_teams,
            "champion_id": self.champion_id,
            "champion_name": self.champion_name,
            "runner_up": self.runner_up,
            "promoted_teams": self.promoted_teams,
            "relegated_teams": self.relegated_teams,
            "promotion_spots": self.promotion_spots,
            "relegation_spots": self.relegation_spots,
            "seed": self.seed,
            "created_at": self.created_at.isoformat(),
        }


# ---------- LeagueTableEntry ----------
@dataclass
class LeagueTableEntry:
    """One club's final row in one season's table."""
    id: str
    season_id: str
    league_id: str
    year: str
    position: int
    club_id: str
    club_name: str
    played: int
    won: int
    drawn: int
    lost: int
    goals_for: int
    goals_against: int
    goal_difference: int
    points: int
    status: str  # StandingStatus value, "" for mid-table

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "season_id": self.season_id,
            "league_id": self.league_id,
            "year": self.year,
            "position": self.position,
            "club_id": self.club_id,
            "club_name": self.club_name,
            "played": self.played,
            "won": self.won,
            "drawn": self.drawn,
            "lost": self.lost,
            "goals_for": self.goals_for,
            "goals_against": self.goals_against,
            "goal_difference": self.goal_difference,
            "points": self.points,
            "status": self.status,
        }


# ---------- MatchRecord ----------
@dataclass
class MatchRecord:
    """A stored fixture of a generated season (optional on save)."""
    id: str
    season_id: str
    league_id: str
    round_number: int
    home_club_id: str
    away_club_id: str
    home_goals: int
    away_goals: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "season_id": self.season_id,
            "league_id": self.league_id,
            "round_number": self.round_number,
            "home_club_id": self.home_club_id,
            "away_club_id": self.away_club_id,
            "home_goals": self.home_goals,
            "away_goals": self.away_goals,
        }
