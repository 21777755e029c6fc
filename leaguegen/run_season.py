"""
Simulate a league season from the command line and print the final table.

Without --league-id a demo league of generated club names is used. With
--league-id the clubs, league configuration and previous table are read from
the entity store; --save writes the result back.

Run from project root: python -m leaguegen.run_season --clubs 10 --tier 2 --seed 42
"""
from __future__ import annotations

import argparse
import random
from pathlib import Path

from leaguegen.logging_config import configure_logging
from leaguegen.persistence import get_connection, init_db, set_db_path
from leaguegen.services.season_service import SeasonGenerationError, SeasonGenerationService
from leaguegen.simulation import (
    ClubInput,
    SeasonConfig,
    SeasonSimulation,
    SeededRNG,
    build_season_table,
    export_season,
    summarize_season,
)

_DEMO_TOWNS = [
    "Ashford", "Brackwater", "Caldmoor", "Dunmere", "Eastholm", "Farrowby",
    "Glenmarsh", "Harrowgate", "Ironbridge", "Kingsreach", "Lowbarrow", "Marchfield",
    "Northwick", "Oakhaven", "Pellston", "Queensferry", "Redcastle", "Stonebury",
    "Thornvale", "Wexmouth",
]
_DEMO_SUFFIXES = ["United", "City", "Athletic", "Rovers", "Town", "Albion", "Wanderers", "FC"]


def demo_clubs(count: int, rng: SeededRNG) -> list[ClubInput]:
    """Named clubs with random historical counters, for a quick demo season."""
    if count > len(_DEMO_TOWNS):
        raise SystemExit(f"Demo league supports at most {len(_DEMO_TOWNS)} clubs.")
    clubs = []
    for i, town in enumerate(_DEMO_TOWNS[:count]):
        clubs.append(ClubInput(
            id=f"demo-{i + 1:02d}",
            name=f"{town} {rng.choice(_DEMO_SUFFIXES)}",
            stability_points=rng.randint(-5, 30),
            league_titles=rng.randint(0, 4),
            promotions=rng.randint(0, 5),
            relegations=rng.randint(0, 5),
            vcc_titles=rng.randint(0, 1),
            ccc_titles=rng.randint(0, 2),
        ))
    return clubs


def format_table(sim: SeasonSimulation) -> str:
    lines = [
        f"  {'Pos':>3}  {'Club':<24} {'P':>3} {'W':>3} {'D':>3} {'L':>3} "
        f"{'GF':>4} {'GA':>4} {'GD':>4} {'Pts':>4}  {'Str':>5}  Status",
        "  " + "-" * 84,
    ]
    for r in sim.standings:
        lines.append(
            f"  {r.position:>3}  {r.club_name:<24} {r.played:>3} {r.won:>3} {r.drawn:>3} {r.lost:>3} "
            f"{r.goals_for:>4} {r.goals_against:>4} {r.goal_difference:>+4} {r.points:>4}  "
            f"{r.strength:>5.1f}  {r.status.value}"
        )
    return "\n".join(lines)


def _print_result(sim: SeasonSimulation, title: str) -> None:
    summary = summarize_season(sim)
    print()
    print("=" * 88)
    print(f"  {title}  [seed={sim.seed}, {len(sim.fixtures)} fixtures]")
    print("=" * 88)
    print(format_table(sim))
    print()
    print(f"  Champion:  {summary.champion_name}")
    print(f"  Runner-up: {summary.runner_up}")
    if summary.promoted_teams:
        print(f"  Promoted:  {summary.promoted_teams}")
    if summary.relegated_teams:
        print(f"  Relegated: {summary.relegated_teams}")
    print()


def run_demo(
    clubs: int,
    tier: int,
    promotion_spots: int,
    relegation_spots: int,
    seed: int | None = None,
    out: Path | None = None,
) -> SeasonSimulation:
    if seed is None:
        seed = random.randint(1, 2**31 - 1)
    rng = SeededRNG(seed)
    config = SeasonConfig(tier=tier, promotion_spots=promotion_spots, relegation_spots=relegation_spots)
    sim = build_season_table(demo_clubs(clubs, rng), config, rng=rng)
    _print_result(sim, f"Demo league (tier {tier})")
    if out is not None:
        export_season(sim, out)
        print(f"  Exported to {out}")
    return sim


def run_from_store(
    league_id: str,
    year: str,
    club_ids: list[str] | None = None,
    db_path: Path | None = None,
    seed: int | None = None,
    save: bool = False,
    sync_stats: bool = False,
    out: Path | None = None,
) -> SeasonSimulation:
    if db_path is not None:
        set_db_path(db_path)
    init_db()
    conn = get_connection()
    try:
        svc = SeasonGenerationService()
        try:
            generated = svc.generate(conn, league_id, year, club_ids=club_ids, seed=seed)
        except SeasonGenerationError as e:
            raise SystemExit(str(e))
        _print_result(generated.simulation, f"{generated.league.name} {year}")
        if save:
            try:
                report = svc.save(conn, generated)
            except SeasonGenerationError as e:
                raise SystemExit(str(e))
            status = "saved" if report.complete else f"saved partially ({len(report.failed_club_ids)} rows failed)"
            print(f"  Season {report.season.id} {status}")
            if sync_stats:
                synced = svc.sync_club_stats(conn, [r.club_id for r in generated.simulation.standings])
                print(f"  Club history synced for {len(synced.updated_club_ids)} clubs")
    finally:
        conn.close()
    if out is not None:
        export_season(generated.simulation, out)
        print(f"  Exported to {out}")
    return generated.simulation


def main():
    parser = argparse.ArgumentParser(description="Simulate a league season and print the table.")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed for reproducibility")
    parser.add_argument("--clubs", type=int, default=12, help="Demo league size")
    parser.add_argument("--tier", type=int, default=1, help="Demo league tier (1 = top flight)")
    parser.add_argument("--promotion-spots", type=int, default=2)
    parser.add_argument("--relegation-spots", type=int, default=3)
    parser.add_argument("--league-id", default=None, help="Simulate a stored league instead of the demo")
    parser.add_argument("--year", default=None, help="Season label for --league-id, e.g. 1995")
    parser.add_argument(
        "--club-id", dest="club_ids", action="append", default=None,
        help="Club to include (repeatable; default: last season's clubs)",
    )
    parser.add_argument("--db", type=Path, default=None, help="Entity store path (default: LEAGUEGEN_DB_PATH)")
    parser.add_argument("--save", action="store_true", help="Save the generated season (with --league-id)")
    parser.add_argument(
        "--sync-stats", action="store_true",
        help="After --save, recount titles/promotions/relegations of the season's clubs",
    )
    parser.add_argument("--out", type=Path, default=None, help="Also export the run as JSON")
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args()
    configure_logging(level=args.log_level, include_uvicorn=False)

    if args.league_id:
        if not args.year:
            parser.error("--year is required with --league-id")
        run_from_store(
            args.league_id, args.year, club_ids=args.club_ids,
            db_path=args.db, seed=args.seed, save=args.save,
            sync_stats=args.sync_stats, out=args.out,
        )
    else:
        if args.save:
            parser.error("--save requires --league-id")
        if args.clubs < 1:
            parser.error("--clubs must be at least 1")
        try:
            run_demo(
                args.clubs, args.tier, args.promotion_spots, args.relegation_spots,
                seed=args.seed, out=args.out,
            )
        except ValueError as e:
            parser.error(str(e))


if __name__ == "__main__":
    main()
