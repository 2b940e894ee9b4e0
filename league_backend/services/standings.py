"""
League table aggregation from played matches.

Win = 3 points, draw = 1, loss = 0. Table order: points desc, goal difference
desc; any remaining tie keeps roster order (stable sort, no head-to-head).
"""
from __future__ import annotations

from typing import Iterable, Sequence

from league_backend.models import Match, Standing, Team
from league_backend.services.errors import ReferentialError

POINTS_WIN = 3
POINTS_DRAW = 1


def empty_table(teams: Sequence[Team]) -> dict[str, Standing]:
    """One zeroed Standing per team, keyed by name, in roster order."""
    return {t.name: Standing(team_name=t.name) for t in teams}


def check_references(table: dict[str, Standing], matches: Iterable[Match]) -> None:
    """Raise ReferentialError if any match names a team outside the table."""
    for m in matches:
        for name in (m.home_team, m.away_team):
            if name not in table:
                raise ReferentialError(f"Match {m.id} references unknown team: {name}")


def apply_result(
    table: dict[str, Standing],
    home_team: str,
    away_team: str,
    home_goals: int,
    away_goals: int,
) -> None:
    """Fold one result into the table in place. Goal difference is left to finalize_table."""
    home = table.get(home_team)
    away = table.get(away_team)
    if home is None:
        raise ReferentialError(f"Unknown team: {home_team}")
    if away is None:
        raise ReferentialError(f"Unknown team: {away_team}")

    home.played += 1
    away.played += 1
    home.goals_for += home_goals
    home.goals_against += away_goals
    away.goals_for += away_goals
    away.goals_against += home_goals

    if home_goals > away_goals:
        home.wins += 1
        home.points += POINTS_WIN
        away.losses += 1
    elif home_goals < away_goals:
        away.wins += 1
        away.points += POINTS_WIN
        home.losses += 1
    else:
        home.draws += 1
        away.draws += 1
        home.points += POINTS_DRAW
        away.points += POINTS_DRAW


def sort_standings(rows: Iterable[Standing]) -> list[Standing]:
    # sorted() is stable: equal keys keep input (roster) order
    return sorted(rows, key=lambda s: (-s.points, -s.goal_difference))


def finalize_table(table: dict[str, Standing]) -> list[Standing]:
    """Recompute goal differences and return rows in table order."""
    for s in table.values():
        s.goal_difference = s.goals_for - s.goals_against
    return sort_standings(table.values())


def compute_standings(teams: Sequence[Team], matches: Iterable[Match]) -> list[Standing]:
    """
    Build the table for the full roster from played matches only.
    Every roster team appears, including those with no matches played.
    """
    matches = list(matches)
    table = empty_table(teams)
    check_references(table, matches)
    for m in matches:
        if not m.played:
            continue
        apply_result(table, m.home_team, m.away_team, m.home_goals, m.away_goals)
    return finalize_table(table)
