"""
Tests for the command-line season runner.
"""
from __future__ import annotations

import json
from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from leaguegen.persistence.db import get_connection, init_db
from leaguegen.persistence.repositories import (
    ClubRepository,
    LeagueRepository,
    NationRepository,
    SeasonRepository,
)
from leaguegen.run_season import demo_clubs, main, run_demo, run_from_store
from leaguegen.simulation import SeededRNG, StandingStatus


class TestRunDemo:
    def test_demo_prints_table(self, capsys):
        sim = run_demo(8, tier=2, promotion_spots=2, relegation_spots=2, seed=42)
        out = capsys.readouterr().out
        assert "seed=42" in out
        assert sim.standings[0].club_name in out
        assert len(sim.fixtures) == 56
        assert len(sim.with_status(StandingStatus.PROMOTED)) == 2

    def test_demo_reproducible(self, capsys):
        a = run_demo(6, tier=1, promotion_spots=2, relegation_spots=3, seed=7)
        b = run_demo(6, tier=1, promotion_spots=2, relegation_spots=3, seed=7)
        assert [(r.club_id, r.points) for r in a.standings] == [(r.club_id, r.points) for r in b.standings]

    def test_demo_export(self, tmp_path, capsys):
        out = tmp_path / "demo.json"
        run_demo(4, tier=1, promotion_spots=2, relegation_spots=1, seed=3, out=out)
        data = json.loads(out.read_text())
        assert data["seed"] == 3
        assert len(data["table"]) == 4

    def test_demo_club_limit(self):
        with pytest.raises(SystemExit):
            demo_clubs(21, SeededRNG(1))


class TestRunFromStore:
    @pytest.fixture
    def stored_league(self, tmp_path):
        db_path = tmp_path / "cli.db"
        init_db(db_path=db_path)
        conn = get_connection(db_path)
        try:
            nation = NationRepository().create(conn, "Testland")
            league = LeagueRepository().create(conn, "Premier", nation.id)
            clubs = ClubRepository()
            for name in ("Athletic", "Borough", "City", "Dynamo", "Eagles"):
                clubs.create(conn, name, nation.id, league.id)
        finally:
            conn.close()
        return db_path, league.id

    def test_no_previous_season_exits(self, stored_league, capsys):
        db_path, league_id = stored_league
        with pytest.raises(SystemExit):
            run_from_store(league_id, "1994", db_path=db_path, seed=1)

    def test_unknown_league_exits(self, stored_league):
        db_path, _ = stored_league
        with pytest.raises(SystemExit):
            run_from_store("missing", "1994", db_path=db_path, seed=1)

    def test_first_season_then_default_selection(self, stored_league, capsys):
        db_path, league_id = stored_league
        conn = get_connection(db_path)
        try:
            club_ids = [c.id for c in ClubRepository().list_all(conn, league_id=league_id)]
        finally:
            conn.close()

        first = run_from_store(league_id, "1994", club_ids=club_ids, db_path=db_path, seed=1, save=True)
        assert "saved" in capsys.readouterr().out
        second = run_from_store(league_id, "1995", db_path=db_path, seed=2, save=True)
        assert sorted(r.club_id for r in second.standings) == sorted(r.club_id for r in first.standings)

        conn = get_connection(db_path)
        try:
            seasons = SeasonRepository().list_by_league(conn, league_id)
        finally:
            conn.close()
        assert [s.year for s in seasons] == ["1995", "1994"]

    def test_same_year_saved_twice_exits(self, stored_league, capsys):
        db_path, league_id = stored_league
        conn = get_connection(db_path)
        try:
            club_ids = [c.id for c in ClubRepository().list_all(conn, league_id=league_id)]
        finally:
            conn.close()
        run_from_store(league_id, "1994", club_ids=club_ids, db_path=db_path, seed=1, save=True)
        with pytest.raises(SystemExit):
            run_from_store(league_id, "1994", club_ids=club_ids, db_path=db_path, seed=2, save=True)

    def test_save_with_sync_stats(self, stored_league, capsys):
        db_path, league_id = stored_league
        conn = get_connection(db_path)
        try:
            club_ids = [c.id for c in ClubRepository().list_all(conn, league_id=league_id)]
        finally:
            conn.close()
        sim = run_from_store(
            league_id, "1994", club_ids=club_ids, db_path=db_path, seed=1, save=True, sync_stats=True
        )
        assert "Club history synced for 5 clubs" in capsys.readouterr().out

        conn = get_connection(db_path)
        try:
            champion = ClubRepository().get(conn, sim.standings[0].club_id)
            relegated = ClubRepository().get(conn, sim.standings[-1].club_id)
        finally:
            conn.close()
        assert champion.league_titles == 1
        assert relegated.relegations == 1


class TestMain:
    @pytest.mark.parametrize("argv", [
        ["--tier", "0"],
        ["--relegation-spots", "-1"],
        ["--clubs", "0"],
        ["--save"],
    ])
    def test_bad_arguments_exit_with_usage_error(self, argv, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["run_season", "--seed", "1", *argv])
        with pytest.raises(SystemExit) as exc:
            main()
        assert exc.value.code == 2
        assert "error:" in capsys.readouterr().err

    def test_demo_run(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["run_season", "--clubs", "4", "--tier", "2", "--seed", "9"])
        main()
        assert "seed=9" in capsys.readouterr().out
