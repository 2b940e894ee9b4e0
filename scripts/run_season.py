#!/usr/bin/env python3
"""
Season demo: set up the configured league → show a projection → simulate week
by week → print the final table.
Run from project root: python3 scripts/run_season.py --seed 7
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root on path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from league_backend.config import configure_logging, get_config
from league_backend.models import Standing, Team
from league_backend.persistence import get_connection, init_db
from league_backend.persistence.db import set_db_path
from league_backend.services.league_service import LeagueService
from league_backend.simulation.rng import SeededRNG

logger = logging.getLogger("run_season")


def _print_table(title: str, rows: list[Standing]) -> None:
    print(f"\n{title}")
    print(f"{'#':>2}  {'Team':<20} {'P':>2} {'W':>2} {'D':>2} {'L':>2} {'GF':>3} {'GA':>3} {'GD':>4} {'Pts':>4}")
    for pos, s in enumerate(rows, start=1):
        print(
            f"{pos:>2}  {s.team_name:<20} {s.played:>2} {s.wins:>2} {s.draws:>2} {s.losses:>2} "
            f"{s.goals_for:>3} {s.goals_against:>3} {s.goal_difference:>4} {s.points:>4}"
        )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Simulate a full league season")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed for a reproducible season")
    parser.add_argument(
        "--db",
        type=Path,
        default=PROJECT_ROOT / "data" / "season_demo.db",
        help="SQLite file to use (recreated each run)",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Allow recreating the database the API is configured to use",
    )
    args = parser.parse_args(argv)

    configure_logging()
    config = get_config()
    if args.db.resolve() == Path(config.db_path).resolve() and not args.force:
        parser.error(f"{args.db} is the configured API database; pass --force to recreate it")
    if args.db.exists():
        args.db.unlink()
    set_db_path(args.db)
    init_db(db_path=args.db)

    rng = SeededRNG(args.seed)
    service = LeagueService()
    conn = get_connection()
    try:
        teams = [Team(name=t.name, strength=t.strength) for t in config.teams]
        league = service.setup_league(conn, teams, config.total_weeks, name=config.league_name)
        logger.info("%s: %d teams, %d fixtures", league.name, len(league.teams), len(league.matches))

        _print_table("Projected final table (before kick-off)", service.projected_standings(conn, rng=rng))

        for week in range(1, league.total_weeks + 1):
            played = service.simulate_week(conn, week, rng=rng)
            print(f"\nWeek {week}")
            for m in played:
                print(f"  {m.home_team} {m.home_goals}-{m.away_goals} {m.away_team}")

        _print_table("Final table", service.standings(conn))
    finally:
        conn.close()


if __name__ == "__main__":
    main()
