"""
Repository interfaces for the entity store.
No business logic; only read/write operations.
"""
from __future__ import annotations

import sqlite3
import uuid
from datetime import datetime
from typing import Any

from leaguegen.models import Club, League, LeagueTableEntry, MatchRecord, Nation, Season


def _parse_datetime(s: str | None) -> datetime:
    if s is None:
        raise ValueError("expected datetime string")
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def _now() -> str:
    return datetime.utcnow().isoformat()


# ---------- NationRepository ----------


class NationRepository:
    """CRUD for nations."""

    def create(self, conn: sqlite3.Connection, name: str, id: str | None = None) -> Nation:
        nid = id or str(uuid.uuid4())
        now = _now()
        conn.execute(
            "INSERT INTO nations (id, name, created_at) VALUES (?, ?, ?)",
            (nid, name, now),
        )
        conn.commit()
        return Nation(id=nid, name=name, created_at=datetime.fromisoformat(now))

    def get(self, conn: sqlite3.Connection, nation_id: str) -> Nation | None:
        row = conn.execute(
            "SELECT id, name, created_at FROM nations WHERE id = ?", (nation_id,)
        ).fetchone()
        if row is None:
            return None
        return Nation(id=row["id"], name=row["name"], created_at=_parse_datetime(row["created_at"]))

    def list_all(self, conn: sqlite3.Connection) -> list[Nation]:
        rows = conn.execute("SELECT id, name, created_at FROM nations ORDER BY name").fetchall()
        return [
            Nation(id=r["id"], name=r["name"], created_at=_parse_datetime(r["created_at"]))
            for r in rows
        ]


# ---------- ClubRepository ----------

_CLUB_COLS = (
    "id, name, nation_id, league_id, stability_points, league_titles, promotions, "
    "relegations, vcc_titles, ccc_titles, is_defunct, is_former_name, created_at"
)

# Columns that update() may touch
CLUB_UPDATABLE_FIELDS = frozenset({
    "name",
    "league_id",
    "stability_points",
    "league_titles",
    "promotions",
    "relegations",
    "vcc_titles",
    "ccc_titles",
    "is_defunct",
    "is_former_name",
})


def _row_to_club(r: sqlite3.Row) -> Club:
    return Club(
        id=r["id"],
        name=r["name"],
        nation_id=r["nation_id"],
        league_id=r["league_id"],
        stability_points=r["stability_points"],
        league_titles=r["league_titles"],
        promotions=r["promotions"],
        relegations=r["relegations"],
        vcc_titles=r["vcc_titles"],
        ccc_titles=r["ccc_titles"],
        is_defunct=bool(r["is_defunct"]),
        is_former_name=bool(r["is_former_name"]),
        created_at=_parse_datetime(r["created_at"]),
    )


class ClubRepository:
    """CRUD for clubs. Historical counters are plain columns."""

    def create(
        self,
        conn: sqlite3.Connection,
        name: str,
        nation_id: str,
        league_id: str | None = None,
        id: str | None = None,
        **counters: Any,
    ) -> Club:
        cid = id or str(uuid.uuid4())
        now = _now()
        unknown = set(counters) - CLUB_UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown club fields: {sorted(unknown)}")
        cols = ["id", "name", "nation_id", "league_id", "created_at"]
        args: list[Any] = [cid, name, nation_id, league_id, now]
        for key, value in counters.items():
            cols.append(key)
            args.append(int(value) if isinstance(value, bool) else value)
        placeholders = ", ".join("?" for _ in cols)
        conn.execute(f"INSERT INTO clubs ({', '.join(cols)}) VALUES ({placeholders})", args)
        conn.commit()
        club = self.get(conn, cid)
        assert club is not None
        return club

    def get(self, conn: sqlite3.Connection, club_id: str) -> Club | None:
        row = conn.execute(f"SELECT {_CLUB_COLS} FROM clubs WHERE id = ?", (club_id,)).fetchone()
        if row is None:
            return None
        return _row_to_club(row)

    def get_many(self, conn: sqlite3.Connection, club_ids: list[str]) -> list[Club]:
        """Clubs for the given ids, in the order requested. Unknown ids are skipped."""
        if not club_ids:
            return []
        placeholders = ", ".join("?" for _ in club_ids)
        rows = conn.execute(
            f"SELECT {_CLUB_COLS} FROM clubs WHERE id IN ({placeholders})", list(club_ids)
        ).fetchall()
        by_id = {r["id"]: _row_to_club(r) for r in rows}
        return [by_id[cid] for cid in club_ids if cid in by_id]

    def list_all(
        self,
        conn: sqlite3.Connection,
        nation_id: str | None = None,
        league_id: str | None = None,
    ) -> list[Club]:
        where: list[str] = []
        args: list[Any] = []
        if nation_id is not None:
            where.append("nation_id = ?")
            args.append(nation_id)
        if league_id is not None:
            where.append("league_id = ?")
            args.append(league_id)
        sql = f"SELECT {_CLUB_COLS} FROM clubs"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY name"
        return [_row_to_club(r) for r in conn.execute(sql, args).fetchall()]

    def update(self, conn: sqlite3.Connection, club_id: str, **fields: Any) -> Club | None:
        """Update the given columns. Returns the updated club or None if not found."""
        unknown = set(fields) - CLUB_UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown club fields: {sorted(unknown)}")
        if fields:
            assignments = ", ".join(f"{k} = ?" for k in fields)
            args = [int(v) if isinstance(v, bool) else v for v in fields.values()]
            conn.execute(f"UPDATE clubs SET {assignments} WHERE id = ?", [*args, club_id])
            conn.commit()
        return self.get(conn, club_id)


# ---------- LeagueRepository ----------

_LEAGUE_COLS = "id, name, nation_id, tier, promotion_spots, relegation_spots, created_at"

LEAGUE_UPDATABLE_FIELDS = frozenset({"name", "tier", "promotion_spots", "relegation_spots"})


def _row_to_league(r: sqlite3.Row) -> League:
    return League(
        id=r["id"],
        name=r["name"],
        nation_id=r["nation_id"],
        tier=r["tier"],
        promotion_spots=r["promotion_spots"],
        relegation_spots=r["relegation_spots"],
        created_at=_parse_datetime(r["created_at"]),
    )


class LeagueRepository:
    """CRUD for leagues. No business logic."""

    def create(
        self,
        conn: sqlite3.Connection,
        name: str,
        nation_id: str,
        tier: int = 1,
        promotion_spots: int = 2,
        relegation_spots: int = 3,
        id: str | None = None,
    ) -> League:
        lid = id or str(uuid.uuid4())
        now = _now()
        conn.execute(
            f"INSERT INTO leagues ({_LEAGUE_COLS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
            (lid, name, nation_id, tier, promotion_spots, relegation_spots, now),
        )
        conn.commit()
        return League(
            id=lid, name=name, nation_id=nation_id, tier=tier,
            promotion_spots=promotion_spots, relegation_spots=relegation_spots,
            created_at=datetime.fromisoformat(now),
        )

    def get(self, conn: sqlite3.Connection, league_id: str) -> League | None:
        row = conn.execute(f"SELECT {_LEAGUE_COLS} FROM leagues WHERE id = ?", (league_id,)).fetchone()
        if row is None:
            return None
        return _row_to_league(row)

    def list_all(self, conn: sqlite3.Connection, nation_id: str | None = None) -> list[League]:
        if nation_id is None:
            rows = conn.execute(f"SELECT {_LEAGUE_COLS} FROM leagues ORDER BY tier, name").fetchall()
        else:
            rows = conn.execute(
                f"SELECT {_LEAGUE_COLS} FROM leagues WHERE nation_id = ? ORDER BY tier, name",
                (nation_id,),
            ).fetchall()
        return [_row_to_league(r) for r in rows]

    def update(self, conn: sqlite3.Connection, league_id: str, **fields: Any) -> League | None:
        unknown = set(fields) - LEAGUE_UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown league fields: {sorted(unknown)}")
        if fields:
            assignments = ", ".join(f"{k} = ?" for k in fields)
            conn.execute(f"UPDATE leagues SET {assignments} WHERE id = ?", [*fields.values(), league_id])
            conn.commit()
        return self.get(conn, league_id)


# ---------- SeasonRepository ----------

_SEASON_COLS = (
    "id, league_id, year, number_of_teams, champion_id, champion_name, runner_up, "
    "promoted_teams, relegated_teams, promotion_spots, relegation_spots, seed, created_at"
)


def _row_to_season(r: sqlite3.Row) -> Season:
    return Season(
        id=r["id"],
        league_id=r["league_id"],
        year=r["year"],
        number_of_teams=r["number_of_teams"],
        champion_id=r["champion_id"],
        champion_name=r["champion_name"],
        runner_up=r["runner_up"],
        promoted_teams=r["promoted_teams"] or "",
        relegated_teams=r["relegated_teams"] or "",
        promotion_spots=r["promotion_spots"],
        relegation_spots=r["relegation_spots"],
        seed=r["seed"],
        created_at=_parse_datetime(r["created_at"]),
    )


class SeasonRepository:
    """CRUD for seasons (one per league per generated year)."""

    def create(
        self,
        conn: sqlite3.Connection,
        league_id: str,
        year: str,
        number_of_teams: int,
        champion_id: str | None = None,
        champion_name: str | None = None,
        runner_up: str | None = None,
        promoted_teams: str = "",
        relegated_teams: str = "",
        promotion_spots: int | None = None,
        relegation_spots: int | None = None,
        seed: int | None = None,
        id: str | None = None,
    ) -> Season:
        sid = id or str(uuid.uuid4())
        now = _now()
        conn.execute(
            f"INSERT INTO seasons ({_SEASON_COLS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                sid, league_id, year, number_of_teams, champion_id, champion_name, runner_up,
                promoted_teams, relegated_teams, promotion_spots, relegation_spots, seed, now,
            ),
        )
        conn.commit()
        season = self.get(conn, sid)
        assert season is not None
        return season

    def get(self, conn: sqlite3.Connection, season_id: str) -> Season | None:
        row = conn.execute(f"SELECT {_SEASON_COLS} FROM seasons WHERE id = ?", (season_id,)).fetchone()
        if row is None:
            return None
        return _row_to_season(row)

    def list_by_league(self, conn: sqlite3.Connection, league_id: str) -> list[Season]:
        """Most recent year first."""
        rows = conn.execute(
            f"SELECT {_SEASON_COLS} FROM seasons WHERE league_id = ? ORDER BY year DESC, created_at DESC",
            (league_id,),
        ).fetchall()
        return [_row_to_season(r) for r in rows]

    def get_by_league_and_year(self, conn: sqlite3.Connection, league_id: str, year: str) -> Season | None:
        row = conn.execute(
            f"SELECT {_SEASON_COLS} FROM seasons WHERE league_id = ? AND year = ? ORDER BY created_at LIMIT 1",
            (league_id, year),
        ).fetchone()
        if row is None:
            return None
        return _row_to_season(row)


# ---------- LeagueTableRepository ----------

_TABLE_COLS = (
    "id, season_id, league_id, year, position, club_id, club_name, played, won, drawn, lost, "
    "goals_for, goals_against, goal_difference, points, status"
)


def _row_to_entry(r: sqlite3.Row) -> LeagueTableEntry:
    return LeagueTableEntry(
        id=r["id"],
        season_id=r["season_id"],
        league_id=r["league_id"],
        year=r["year"],
        position=r["position"],
        club_id=r["club_id"],
        club_name=r["club_name"],
        played=r["played"],
        won=r["won"],
        drawn=r["drawn"],
        lost=r["lost"],
        goals_for=r["goals_for"],
        goals_against=r["goals_against"],
        goal_difference=r["goal_difference"],
        points=r["points"],
        status=r["status"] or "",
    )


class LeagueTableRepository:
    """CRUD for league_tables. One row per club per season."""

    def create(
        self,
        conn: sqlite3.Connection,
        season_id: str,
        league_id: str,
        year: str,
        position: int,
        club_id: str,
        club_name: str,
        played: int,
        won: int,
        drawn: int,
        lost: int,
        goals_for: int,
        goals_against: int,
        goal_difference: int,
        points: int,
        status: str = "",
        id: str | None = None,
    ) -> LeagueTableEntry:
        eid = id or str(uuid.uuid4())
        entry = LeagueTableEntry(
            id=eid, season_id=season_id, league_id=league_id, year=year, position=position,
            club_id=club_id, club_name=club_name, played=played, won=won, drawn=drawn, lost=lost,
            goals_for=goals_for, goals_against=goals_against, goal_difference=goal_difference,
            points=points, status=status,
        )
        conn.execute(
            f"INSERT INTO league_tables ({_TABLE_COLS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                eid, season_id, league_id, year, position, club_id, club_name, played, won, drawn,
                lost, goals_for, goals_against, goal_difference, points, status,
            ),
        )
        conn.commit()
        return entry

    def list_by_season(self, conn: sqlite3.Connection, season_id: str) -> list[LeagueTableEntry]:
        rows = conn.execute(
            f"SELECT {_TABLE_COLS} FROM league_tables WHERE season_id = ? ORDER BY position",
            (season_id,),
        ).fetchall()
        return [_row_to_entry(r) for r in rows]

    def list_by_league_and_year(
        self, conn: sqlite3.Connection, league_id: str, year: str
    ) -> list[LeagueTableEntry]:
        rows = conn.execute(
            f"SELECT {_TABLE_COLS} FROM league_tables WHERE league_id = ? AND year = ? ORDER BY position",
            (league_id, year),
        ).fetchall()
        return [_row_to_entry(r) for r in rows]

    def list_years(self, conn: sqlite3.Connection, league_id: str) -> list[str]:
        """Distinct year labels with table rows for this league, most recent first."""
        rows = conn.execute(
            "SELECT DISTINCT year FROM league_tables WHERE league_id = ? ORDER BY year DESC",
            (league_id,),
        ).fetchall()
        return [r["year"] for r in rows]

    def list_with_tier(
        self, conn: sqlite3.Connection, club_ids: list[str] | None = None
    ) -> list[tuple[LeagueTableEntry, int | None]]:
        """
        Table rows paired with the tier of their league (None if the league is gone),
        optionally restricted to some clubs. Ordered by club, then year.
        """
        cols = ", ".join(f"t.{c.strip()}" for c in _TABLE_COLS.split(","))
        sql = f"SELECT {cols}, l.tier AS tier FROM league_tables t LEFT JOIN leagues l ON l.id = t.league_id"
        args: list[Any] = []
        if club_ids is not None:
            if not club_ids:
                return []
            sql += f" WHERE t.club_id IN ({', '.join('?' for _ in club_ids)})"
            args.extend(club_ids)
        sql += " ORDER BY t.club_id, t.year"
        return [(_row_to_entry(r), r["tier"]) for r in conn.execute(sql, args).fetchall()]


# ---------- MatchRepository ----------

_MATCH_COLS = "id, season_id, league_id, round_number, home_club_id, away_club_id, home_goals, away_goals"


class MatchRepository:
    """CRUD for stored fixtures of generated seasons."""

    def create(
        self,
        conn: sqlite3.Connection,
        season_id: str,
        league_id: str,
        round_number: int,
        home_club_id: str,
        away_club_id: str,
        home_goals: int,
        away_goals: int,
        id: str | None = None,
        commit: bool = True,
    ) -> MatchRecord:
        mid = id or str(uuid.uuid4())
        conn.execute(
            f"INSERT INTO matches ({_MATCH_COLS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (mid, season_id, league_id, round_number, home_club_id, away_club_id, home_goals, away_goals),
        )
        if commit:
            conn.commit()
        return MatchRecord(
            id=mid, season_id=season_id, league_id=league_id, round_number=round_number,
            home_club_id=home_club_id, away_club_id=away_club_id,
            home_goals=home_goals, away_goals=away_goals,
        )

    def list_by_season(self, conn: sqlite3.Connection, season_id: str) -> list[MatchRecord]:
        rows = conn.execute(
            f"SELECT {_MATCH_COLS} FROM matches WHERE season_id = ? ORDER BY round_number, rowid",
            (season_id,),
        ).fetchall()
        return [
            MatchRecord(
                id=r["id"], season_id=r["season_id"], league_id=r["league_id"],
                round_number=r["round_number"], home_club_id=r["home_club_id"],
                away_club_id=r["away_club_id"], home_goals=r["home_goals"], away_goals=r["away_goals"],
            )
            for r in rows
        ]
