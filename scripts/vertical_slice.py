#!/usr/bin/env python3
"""
Vertical slice: Create nation, league, clubs → Generate two seasons → Save → Retrieve.
The second season uses the first season's table as previous standings, and club
history (promotions, relegations) is synced from it before the second run.
Run from project root: python3 scripts/vertical_slice.py
"""
from __future__ import annotations

import sys
from pathlib import Path

# Ensure project root on path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from leaguegen.logging_config import configure_logging
from leaguegen.persistence import (
    init_db,
    get_connection,
    set_db_path,
    NationRepository,
    LeagueRepository,
    ClubRepository,
    LeagueTableRepository,
)
from leaguegen.services import SeasonGenerationService

CLUBS = [
    ("Ashford United", 22, 3),
    ("Brackwater City", 18, 1),
    ("Caldmoor Athletic", 12, 0),
    ("Dunmere Rovers", 9, 0),
    ("Eastholm Town", 4, 0),
    ("Farrowby Albion", -2, 0),
]


def main() -> None:
    configure_logging(include_uvicorn=False)
    # Use data/vertical_slice.db for demo (distinct from the default store)
    db_path = PROJECT_ROOT / "data" / "vertical_slice.db"
    if db_path.exists():
        db_path.unlink()
    set_db_path(db_path)
    init_db(db_path=db_path)

    conn = get_connection()
    try:
        nation = NationRepository().create(conn, "Turuliand")
        league = LeagueRepository().create(
            conn, "Turuliand Second Division", nation.id, tier=2, promotion_spots=1, relegation_spots=1
        )
        print(f"Created league: {league.name} (tier {league.tier}, id={league.id})")

        club_repo = ClubRepository()
        club_ids = []
        for name, stability, titles in CLUBS:
            club = club_repo.create(
                conn, name, nation.id, league_id=league.id,
                stability_points=stability, league_titles=titles,
            )
            club_ids.append(club.id)
        print(f"Created {len(club_ids)} clubs")

        svc = SeasonGenerationService()
        first = svc.generate(conn, league.id, "1994", club_ids=club_ids, seed=1994)
        report = svc.save(conn, first, store_fixtures=True)
        print(f"Saved 1994: champion {first.summary.champion_name}, complete={report.complete}")
        synced = svc.sync_club_stats(conn, club_ids)
        print(f"Synced history for {len(synced.updated_club_ids)} clubs from the 1994 table")

        # No club_ids: defaults to last season's clubs, previous positions feed strength
        second = svc.generate(conn, league.id, "1995", seed=1995)
        report = svc.save(conn, second)
        print(f"Saved 1995: champion {second.summary.champion_name}, complete={report.complete}")

        table = LeagueTableRepository().list_by_season(conn, report.season.id)
        for row in table:
            print(f"  {row.position:>2}. {row.club_name:<20} {row.points:>3} pts  {row.status}")

        print("\nVertical slice complete.")
    finally:
        conn.close()


if __name__ == "__main__":
    main()
