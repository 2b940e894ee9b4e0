"""
Deterministic fixture generation for a double round-robin league.

Every team meets every other team twice, once at home and once away, so a
roster of N teams yields N*(N-1) fixtures. Weeks come from the roster
positions of the two sides: week = (i + j) mod W, with 0 mapped to W.

This is a placeholder week policy, not a true round-robin scheduler: weeks may
hold different numbers of matches and a team can appear twice in one week.
Same roster ordering and W yields the same fixture list.
"""
from __future__ import annotations

from typing import Any, Sequence

from league_backend.services.errors import ConfigurationError


def week_for_pair(home_index: int, away_index: int, total_weeks: int) -> int:
    """1-based week for the fixture between roster positions home_index and away_index."""
    week = (home_index + away_index) % total_weeks
    return total_weeks if week == 0 else week


def generate_fixtures(team_names: Sequence[str], total_weeks: int) -> list[tuple[int, str, str]]:
    """
    Return (week, home_team, away_team) for every ordered pair of distinct teams.
    Ordered by home roster index, then away roster index.
    """
    names = list(team_names)
    if len(names) < 2:
        raise ConfigurationError(f"Need at least 2 teams to generate fixtures (got {len(names)})")
    if total_weeks < 1:
        raise ConfigurationError(f"Week count must be at least 1 (got {total_weeks})")
    if len(set(names)) != len(names):
        raise ConfigurationError("Team names must be unique")
    result: list[tuple[int, str, str]] = []
    for i, home in enumerate(names):
        for j, away in enumerate(names):
            if i == j:
                continue
            result.append((week_for_pair(i, j, total_weeks), home, away))
    return result


def generate_league_schedule(team_names: Sequence[str], total_weeks: int) -> list[dict[str, Any]]:
    """
    Return list of fixtures: { "week": int, "home_team": str, "away_team": str }.
    Deterministic; one fixture per ordered pair.
    """
    return [
        {"week": w, "home_team": h, "away_team": a}
        for w, h, a in generate_fixtures(team_names, total_weeks)
    ]
