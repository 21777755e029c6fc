"""
SQLite schema for the entity store.
Migration-friendly: each table created with IF NOT EXISTS.
"""
from __future__ import annotations


def nations_schema() -> str:
    return """
    CREATE TABLE IF NOT EXISTS nations (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        created_at TEXT NOT NULL
    );
    """


def leagues_schema() -> str:
    """Division in a nation's pyramid. tier 1 = top flight."""
    return """
    CREATE TABLE IF NOT EXISTS leagues (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        nation_id TEXT NOT NULL,
        tier INTEGER NOT NULL DEFAULT 1,
        promotion_spots INTEGER NOT NULL DEFAULT 2,
        relegation_spots INTEGER NOT NULL DEFAULT 3,
        created_at TEXT NOT NULL,
        FOREIGN KEY (nation_id) REFERENCES nations(id)
    );
    CREATE INDEX IF NOT EXISTS ix_leagues_nation ON leagues(nation_id);
    """


def clubs_schema() -> str:
    """Clubs belong to a nation; league_id is the league they currently play in (nullable)."""
    return """
    CREATE TABLE IF NOT EXISTS clubs (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        nation_id TEXT NOT NULL,
        league_id TEXT,
        stability_points INTEGER NOT NULL DEFAULT 0,
        league_titles INTEGER NOT NULL DEFAULT 0,
        promotions INTEGER NOT NULL DEFAULT 0,
        relegations INTEGER NOT NULL DEFAULT 0,
        vcc_titles INTEGER NOT NULL DEFAULT 0,
        ccc_titles INTEGER NOT NULL DEFAULT 0,
        is_defunct INTEGER NOT NULL DEFAULT 0,
        is_former_name INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        FOREIGN KEY (nation_id) REFERENCES nations(id),
        FOREIGN KEY (league_id) REFERENCES leagues(id)
    );
    CREATE INDEX IF NOT EXISTS ix_clubs_nation ON clubs(nation_id);
    CREATE INDEX IF NOT EXISTS ix_clubs_league ON clubs(league_id);
    """


def seasons_schema() -> str:
    """One generated season of a league. year is a display label, e.g. '1994' or '1994-95'."""
    return """
    CREATE TABLE IF NOT EXISTS seasons (
        id TEXT PRIMARY KEY,
        league_id TEXT NOT NULL,
        year TEXT NOT NULL,
        number_of_teams INTEGER NOT NULL,
        champion_id TEXT,
        champion_name TEXT,
        runner_up TEXT,
        promoted_teams TEXT NOT NULL DEFAULT '',
        relegated_teams TEXT NOT NULL DEFAULT '',
        promotion_spots INTEGER,
        relegation_spots INTEGER,
        seed INTEGER,
        created_at TEXT NOT NULL,
        FOREIGN KEY (league_id) REFERENCES leagues(id)
    );
    CREATE INDEX IF NOT EXISTS ix_seasons_league ON seasons(league_id);
    """


def league_tables_schema() -> str:
    """One row per club per season. status: champion | promoted | relegated | ''."""
    return """
    CREATE TABLE IF NOT EXISTS league_tables (
        id TEXT PRIMARY KEY,
        season_id TEXT NOT NULL,
        league_id TEXT NOT NULL,
        year TEXT NOT NULL,
        position INTEGER NOT NULL,
        club_id TEXT NOT NULL,
        club_name TEXT NOT NULL,
        played INTEGER NOT NULL,
        won INTEGER NOT NULL,
        drawn INTEGER NOT NULL,
        lost INTEGER NOT NULL,
        goals_for INTEGER NOT NULL,
        goals_against INTEGER NOT NULL,
        goal_difference INTEGER NOT NULL,
        points INTEGER NOT NULL,
        status TEXT NOT NULL DEFAULT '',
        FOREIGN KEY (season_id) REFERENCES seasons(id),
        FOREIGN KEY (league_id) REFERENCES leagues(id),
        FOREIGN KEY (club_id) REFERENCES clubs(id)
    );
    CREATE INDEX IF NOT EXISTS ix_league_tables_season ON league_tables(season_id);
    CREATE INDEX IF NOT EXISTS ix_league_tables_league_year ON league_tables(league_id, year);
    """


def matches_schema() -> str:
    """Fixtures of a generated season, stored only when requested on save."""
    return """
    CREATE TABLE IF NOT EXISTS matches (
        id TEXT PRIMARY KEY,
        season_id TEXT NOT NULL,
        league_id TEXT NOT NULL,
        round_number INTEGER NOT NULL,
        home_club_id TEXT NOT NULL,
        away_club_id TEXT NOT NULL,
        home_goals INTEGER NOT NULL,
        away_goals INTEGER NOT NULL,
        FOREIGN KEY (season_id) REFERENCES seasons(id),
        FOREIGN KEY (home_club_id) REFERENCES clubs(id),
        FOREIGN KEY (away_club_id) REFERENCES clubs(id)
    );
    CREATE INDEX IF NOT EXISTS ix_matches_season ON matches(season_id);
    """


def all_schema_sql() -> str:
    """Combine all schema DDL for a single execution. Order: nations, leagues, clubs, seasons, league_tables, matches."""
    return "\n".join([
        nations_schema(),
        leagues_schema(),
        clubs_schema(),
        seasons_schema(),
        league_tables_schema(),
        matches_schema(),
    ])
