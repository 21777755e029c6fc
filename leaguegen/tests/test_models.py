"""
Tests for entity records and the repositories behind them.
"""
from __future__ import annotations

from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from leaguegen.models import StabilityStatus, stability_status
from leaguegen.persistence.db import get_connection, init_db, set_db_path
from leaguegen.persistence.repositories import (
    ClubRepository,
    LeagueRepository,
    LeagueTableRepository,
    NationRepository,
    SeasonRepository,
)
from leaguegen.simulation import ClubInput


@pytest.fixture
def db_conn(tmp_path):
    db_path = tmp_path / "models_test.db"
    set_db_path(db_path)
    init_db(db_path=db_path)
    conn = get_connection()
    try:
        yield conn
    finally:
        conn.close()


@pytest.mark.parametrize("points,expected", [
    (30, StabilityStatus.THRIVING),
    (25, StabilityStatus.THRIVING),
    (24, StabilityStatus.STABLE),
    (15, StabilityStatus.STABLE),
    (14, StabilityStatus.STRUGGLING),
    (5, StabilityStatus.STRUGGLING),
    (4, StabilityStatus.AT_RISK),
    (-4, StabilityStatus.AT_RISK),
    (-5, StabilityStatus.FOLDED),
    (None, StabilityStatus.AT_RISK),
])
def test_stability_status(points, expected):
    assert stability_status(points) == expected


def test_club_create_and_update(db_conn):
    nation = NationRepository().create(db_conn, "Testland")
    league = LeagueRepository().create(db_conn, "First Division", nation.id)
    repo = ClubRepository()
    club = repo.create(db_conn, "Rovers", nation.id, league.id, stability_points=18, league_titles=2)
    assert club.league_id == league.id
    assert club.stability_status == StabilityStatus.STABLE
    assert club.to_dict()["stability_status"] == "stable"
    assert club.is_defunct is False

    updated = repo.update(db_conn, club.id, is_defunct=True, stability_points=-10)
    assert updated.is_defunct is True
    assert updated.stability_status == StabilityStatus.FOLDED
    assert repo.update(db_conn, "missing", name="X") is None


def test_club_unknown_field_rejected(db_conn):
    nation = NationRepository().create(db_conn, "Testland")
    with pytest.raises(ValueError):
        ClubRepository().create(db_conn, "Rovers", nation.id, goals=3)


def test_get_many_keeps_order(db_conn):
    nation = NationRepository().create(db_conn, "Testland")
    repo = ClubRepository()
    a = repo.create(db_conn, "A", nation.id)
    b = repo.create(db_conn, "B", nation.id)
    c = repo.create(db_conn, "C", nation.id)
    clubs = repo.get_many(db_conn, [c.id, "nope", a.id, b.id])
    assert [x.id for x in clubs] == [c.id, a.id, b.id]


def test_club_input_from_club(db_conn):
    nation = NationRepository().create(db_conn, "Testland")
    club = ClubRepository().create(db_conn, "Rovers", nation.id, vcc_titles=1, relegations=4)
    inp = ClubInput.from_club(club)
    assert (inp.id, inp.name, inp.vcc_titles, inp.relegations, inp.promotions) == (club.id, "Rovers", 1, 4, 0)


def test_league_defaults(db_conn):
    nation = NationRepository().create(db_conn, "Testland")
    league = LeagueRepository().create(db_conn, "Second Division", nation.id, tier=2)
    fetched = LeagueRepository().get(db_conn, league.id)
    assert (fetched.tier, fetched.promotion_spots, fetched.relegation_spots) == (2, 2, 3)


def test_table_years_most_recent_first(db_conn):
    nation = NationRepository().create(db_conn, "Testland")
    league = LeagueRepository().create(db_conn, "First Division", nation.id)
    club = ClubRepository().create(db_conn, "Rovers", nation.id, league.id)
    seasons = SeasonRepository()
    table = LeagueTableRepository()
    for year in ("1993", "1995", "1994"):
        season = seasons.create(db_conn, league.id, year, number_of_teams=1)
        table.create(
            db_conn, season.id, league.id, year, 1, club.id, club.name,
            0, 0, 0, 0, 0, 0, 0, 0, "champion",
        )
    assert table.list_years(db_conn, league.id) == ["1995", "1994", "1993"]
    assert [s.year for s in seasons.list_by_league(db_conn, league.id)] == ["1995", "1994", "1993"]
    rows = table.list_by_league_and_year(db_conn, league.id, "1994")
    assert len(rows) == 1 and rows[0].status == "champion"
