"""
Season generation service: reads clubs, league configuration and the previous
season from the entity store, runs the season simulator, and saves the result.

generate() never writes. save() is best-effort: one Season record, then one
LeagueTable row per club, each written independently. A failed row is logged
and reported, never rolled back.
"""
from __future__ import annotations

import logging
import random
import sqlite3
from dataclasses import dataclass, field

from leaguegen import config
from leaguegen.models import Club, League, LeagueTableEntry, Season
from leaguegen.persistence.repositories import (
    ClubRepository,
    LeagueRepository,
    LeagueTableRepository,
    MatchRepository,
    SeasonRepository,
)
from leaguegen.simulation import (
    ClubInput,
    SeasonConfig,
    SeasonSimulation,
    SeasonSummary,
    SeededRNG,
    StandingStatus,
    build_season_table,
    summarize_season,
)

logger = logging.getLogger(__name__)


# ---------- Exceptions ----------


class SeasonGenerationError(ValueError):
    """Base class for refusals to generate or save a season."""


class LeagueNotFoundError(SeasonGenerationError):
    """League id does not exist in the store."""


class ClubNotFoundError(SeasonGenerationError):
    """One or more selected club ids do not exist."""


class InsufficientClubsError(SeasonGenerationError):
    """Too few clubs for a meaningful season."""


class SeasonAlreadyExistsError(SeasonGenerationError):
    """The league already has a saved season for that year."""


# ---------- Results ----------


@dataclass
class GeneratedSeason:
    """An unsaved season: discard it, regenerate, or pass it to save()."""
    league: League
    year: str
    seed: int
    simulation: SeasonSimulation
    summary: SeasonSummary


@dataclass
class SaveReport:
    season: Season
    rows_written: int = 0
    failed_club_ids: list[str] = field(default_factory=list)
    fixtures_written: int = 0
    fixtures_failed: int = 0

    @property
    def complete(self) -> bool:
        return not self.failed_club_ids and self.fixtures_failed == 0


@dataclass
class ClubStatsSyncReport:
    updated_club_ids: list[str] = field(default_factory=list)
    skipped_club_ids: list[str] = field(default_factory=list)  # no table rows


# ---------- SeasonGenerationService ----------


class SeasonGenerationService:
    """
    Orchestrates season generation for one league.
    Persistence is delegated to repositories; simulation to leaguegen.simulation.
    """

    def __init__(self, min_clubs: int | None = None) -> None:
        self.min_clubs = config.MIN_CLUBS if min_clubs is None else min_clubs
        self._club_repo = ClubRepository()
        self._league_repo = LeagueRepository()
        self._season_repo = SeasonRepository()
        self._table_repo = LeagueTableRepository()
        self._match_repo = MatchRepository()

    def get_league(self, conn: sqlite3.Connection, league_id: str) -> League:
        league = self._league_repo.get(conn, league_id)
        if league is None:
            raise LeagueNotFoundError(f"League not found: {league_id}")
        return league

    # ---------- Reads ----------

    def list_eligible_clubs(self, conn: sqlite3.Connection, league_id: str) -> list[Club]:
        """
        Clubs of the league's nation that are in the league, or are neither defunct
        nor a former name. Clubs already in the league come first, then by name.
        """
        league = self.get_league(conn, league_id)
        clubs = self._club_repo.list_all(conn, nation_id=league.nation_id)
        eligible = [
            c for c in clubs
            if c.league_id == league_id or (not c.is_defunct and not c.is_former_name)
        ]
        return sorted(eligible, key=lambda c: (c.league_id != league_id, c.name.lower()))

    def previous_standings(
        self, conn: sqlite3.Connection, league_id: str, year: str
    ) -> list[LeagueTableEntry]:
        """Table rows of the most recent year strictly before `year`; empty if none."""
        for prev_year in self._table_repo.list_years(conn, league_id):
            if prev_year < year:
                return self._table_repo.list_by_league_and_year(conn, league_id, prev_year)
        return []

    def default_selection(self, conn: sqlite3.Connection, league_id: str, year: str) -> list[str]:
        """Club ids pre-selected for a new season: last season's table, in position order."""
        seen: set[str] = set()
        ids: list[str] = []
        for entry in self.previous_standings(conn, league_id, year):
            if entry.club_id and entry.club_id not in seen:
                seen.add(entry.club_id)
                ids.append(entry.club_id)
        return ids

    # ---------- Generate ----------

    def _resolve_clubs(self, conn: sqlite3.Connection, club_ids: list[str]) -> list[Club]:
        unique_ids = list(dict.fromkeys(club_ids))
        clubs = self._club_repo.get_many(conn, unique_ids)
        if len(clubs) != len(unique_ids):
            found = {c.id for c in clubs}
            missing = [cid for cid in unique_ids if cid not in found]
            raise ClubNotFoundError(f"Club(s) not found: {', '.join(missing)}")
        return clubs

    def generate(
        self,
        conn: sqlite3.Connection,
        league_id: str,
        year: str,
        club_ids: list[str] | None = None,
        seed: int | None = None,
    ) -> GeneratedSeason:
        """
        Simulate a season without persisting anything.
        club_ids=None uses the previous season's clubs. Same inputs and seed => same table.
        """
        league = self.get_league(conn, league_id)
        if club_ids is None:
            club_ids = self.default_selection(conn, league_id, year)
        clubs = self._resolve_clubs(conn, club_ids)
        if len(clubs) < self.min_clubs:
            raise InsufficientClubsError(
                f"Need at least {self.min_clubs} clubs to generate a season (got {len(clubs)})"
            )
        season_config = SeasonConfig(
            tier=league.tier,
            promotion_spots=league.promotion_spots,
            relegation_spots=league.relegation_spots,
        )
        if season_config.overlaps(len(clubs)):
            logger.warning(
                "League %s: promotion/relegation places overlap with %d clubs (tier %d, up %d, down %d)",
                league.name, len(clubs), season_config.tier,
                season_config.promotion_spots, season_config.relegation_spots,
            )
        seed_used = seed if seed is not None else random.randint(1, 2**31 - 1)
        previous = {e.club_id: e.position for e in self.previous_standings(conn, league_id, year)}
        simulation = build_season_table(
            [ClubInput.from_club(c) for c in clubs],
            season_config,
            previous_positions=previous,
            rng=SeededRNG(seed_used),
        )
        logger.info(
            "Generated %s %s: %d clubs, %d fixtures, seed %d",
            league.name, year, len(clubs), len(simulation.fixtures), seed_used,
        )
        return GeneratedSeason(
            league=league,
            year=year,
            seed=seed_used,
            simulation=simulation,
            summary=summarize_season(simulation),
        )

    # ---------- Save ----------

    def save(
        self,
        conn: sqlite3.Connection,
        generated: GeneratedSeason,
        store_fixtures: bool = False,
    ) -> SaveReport:
        """
        Write the Season record, then one LeagueTable row per club (and optionally
        every fixture). Refuses a year the league already has. Failures after the Season record is created are reported,
        not rolled back; the caller decides whether to repair or retry.
        """
        league = generated.league
        summary = generated.summary
        cfg = generated.simulation.config
        if self._season_repo.get_by_league_and_year(conn, league.id, generated.year) is not None:
            raise SeasonAlreadyExistsError(f"{league.name} already has a saved {generated.year} season")
        season = self._season_repo.create(
            conn,
            league_id=league.id,
            year=generated.year,
            number_of_teams=summary.number_of_teams,
            champion_id=summary.champion_id,
            champion_name=summary.champion_name,
            runner_up=summary.runner_up,
            promoted_teams=summary.promoted_teams,
            relegated_teams=summary.relegated_teams,
            promotion_spots=cfg.promotion_spots,
            relegation_spots=cfg.relegation_spots,
            seed=generated.seed,
        )
        report = SaveReport(season=season)

        for row in generated.simulation.standings:
            try:
                self._table_repo.create(
                    conn,
                    season_id=season.id,
                    league_id=league.id,
                    year=generated.year,
                    position=row.position,
                    club_id=row.club_id,
                    club_name=row.club_name,
                    played=row.played,
                    won=row.won,
                    drawn=row.drawn,
                    lost=row.lost,
                    goals_for=row.goals_for,
                    goals_against=row.goals_against,
                    goal_difference=row.goal_difference,
                    points=row.points,
                    status=row.status.value,
                )
                report.rows_written += 1
            except sqlite3.Error:
                logger.exception("Failed to write table row for club %s (season %s)", row.club_id, season.id)
                report.failed_club_ids.append(row.club_id)

        if store_fixtures:
            for fx in generated.simulation.fixtures:
                try:
                    self._match_repo.create(
                        conn,
                        season_id=season.id,
                        league_id=league.id,
                        round_number=fx.round_number,
                        home_club_id=fx.home_club_id,
                        away_club_id=fx.away_club_id,
                        home_goals=fx.result.home_goals,
                        away_goals=fx.result.away_goals,
                    )
                    report.fixtures_written += 1
                except sqlite3.Error:
                    logger.exception(
                        "Failed to write fixture %s v %s (season %s)",
                        fx.home_club_id, fx.away_club_id, season.id,
                    )
                    report.fixtures_failed += 1

        if not report.complete:
            logger.error(
                "Season %s saved partially: %d/%d table rows, %d fixtures failed",
                season.id, report.rows_written, len(generated.simulation.standings), report.fixtures_failed,
            )
        else:
            logger.info("Saved season %s (%s %s)", season.id, league.name, generated.year)
        return report

    # ---------- Club history ----------

    def sync_club_stats(
        self, conn: sqlite3.Connection, club_ids: list[str] | None = None
    ) -> ClubStatsSyncReport:
        """
        Recount league_titles, promotions and relegations from saved table rows and
        overwrite the club counters the strength model reads. A title counts only in
        a tier-1 league. Rows with no games played are ignored; clubs without rows
        are left untouched.
        """
        if club_ids is None:
            club_ids = [c.id for c in self._club_repo.list_all(conn)]
        else:
            club_ids = list(dict.fromkeys(club_ids))
            missing = [cid for cid in club_ids if self._club_repo.get(conn, cid) is None]
            if missing:
                raise ClubNotFoundError(f"Club(s) not found: {', '.join(missing)}")

        counts: dict[str, dict[str, int]] = {}
        for entry, tier in self._table_repo.list_with_tier(conn, club_ids):
            if entry.played <= 0:
                continue
            c = counts.setdefault(entry.club_id, {"league_titles": 0, "promotions": 0, "relegations": 0})
            if tier == 1 and (entry.status == StandingStatus.CHAMPION.value or entry.position == 1):
                c["league_titles"] += 1
            if entry.status == StandingStatus.PROMOTED.value:
                c["promotions"] += 1
            elif entry.status == StandingStatus.RELEGATED.value:
                c["relegations"] += 1

        report = ClubStatsSyncReport()
        for club_id in club_ids:
            if club_id not in counts:
                report.skipped_club_ids.append(club_id)
                continue
            self._club_repo.update(conn, club_id, **counts[club_id])
            report.updated_club_ids.append(club_id)
        logger.info(
            "Synced club history: %d updated, %d without table rows",
            len(report.updated_club_ids), len(report.skipped_club_ids),
        )
        return report
