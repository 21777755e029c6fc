"""
Serialization and summaries for simulated seasons: JSON-ready dicts for rows,
fixtures and strengths, the Season summary written on save, and a JSON export
of a whole run (seed + config + table) so it can be regenerated exactly.
"""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from .schemas import (
    ClubStrength,
    Fixture,
    SeasonSimulation,
    StandingRow,
    StandingStatus,
)


def standing_row_to_dict(row: StandingRow) -> dict[str, Any]:
    return {
        "position": row.position,
        "club_id": row.club_id,
        "club_name": row.club_name,
        "played": row.played,
        "won": row.won,
        "drawn": row.drawn,
        "lost": row.lost,
        "goals_for": row.goals_for,
        "goals_against": row.goals_against,
        "goal_difference": row.goal_difference,
        "points": row.points,
        "status": row.status.value,
        "strength": round(row.strength, 1),
    }


def fixture_to_dict(fx: Fixture) -> dict[str, Any]:
    return {
        "round_number": fx.round_number,
        "home_club_id": fx.home_club_id,
        "away_club_id": fx.away_club_id,
        "home_goals": fx.result.home_goals,
        "away_goals": fx.result.away_goals,
        "outcome": fx.result.outcome.value,
    }


def strength_to_dict(s: ClubStrength) -> dict[str, Any]:
    return {
        "club_id": s.club_id,
        "strength": round(s.strength, 2),
        "previous_position": s.previous_position,
    }


@dataclass
class SeasonSummary:
    """Headline facts of a season, as stored on the Season record."""
    number_of_teams: int
    champion_id: str | None
    champion_name: str | None
    runner_up: str | None
    promoted_teams: str
    relegated_teams: str


def summarize_season(sim: SeasonSimulation) -> SeasonSummary:
    """Champion, runner-up and comma-joined promoted/relegated club names."""
    rows = sim.standings
    champion = rows[0] if rows else None
    runner_up = rows[1] if len(rows) > 1 else None
    return SeasonSummary(
        number_of_teams=len(rows),
        champion_id=champion.club_id if champion else None,
        champion_name=champion.club_name if champion else None,
        runner_up=runner_up.club_name if runner_up else None,
        promoted_teams=", ".join(r.club_name for r in sim.with_status(StandingStatus.PROMOTED)),
        relegated_teams=", ".join(r.club_name for r in sim.with_status(StandingStatus.RELEGATED)),
    )


def simulation_to_dict(sim: SeasonSimulation, include_fixtures: bool = True) -> dict[str, Any]:
    d: dict[str, Any] = {
        "seed": sim.seed,
        "config": asdict(sim.config),
        "summary": asdict(summarize_season(sim)),
        "strengths": [strength_to_dict(s) for s in sim.strengths],
        "table": [standing_row_to_dict(r) for r in sim.standings],
    }
    if include_fixtures:
        d["fixtures"] = [fixture_to_dict(f) for f in sim.fixtures]
    return d


def export_season(sim: SeasonSimulation, path: str | Path) -> Path:
    """Write the full run to a JSON file, creating parent directories."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(simulation_to_dict(sim), indent=2))
    return out
