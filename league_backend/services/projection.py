"""
Projected final table: current standings plus a simulated result for every
remaining fixture. Works on an in-memory copy; match objects are never touched,
so nothing simulated here can be persisted.
"""
from __future__ import annotations

import copy
import logging
from typing import Any, Iterable, Sequence

from league_backend.models import Match, Standing, Team
from league_backend.services.errors import ReferentialError
from league_backend.services.simulation_service import simulate_score
from league_backend.services.standings import apply_result, compute_standings, finalize_table

logger = logging.getLogger(__name__)


def project_standings(
    teams: Sequence[Team],
    matches: Iterable[Match],
    rng: Any | None = None,
) -> list[Standing]:
    """
    Return the table as it would look if all unplayed matches were simulated now.
    Each call draws fresh outcomes unless a seeded rng is supplied.
    """
    matches = list(matches)
    current = {s.team_name: s for s in compute_standings(teams, matches)}
    # Rebuilt in roster order so ties after the re-sort match compute_standings
    table = {t.name: copy.copy(current[t.name]) for t in teams}
    strengths = {t.name: t.strength for t in teams}

    remaining = [m for m in matches if not m.played]
    for m in remaining:
        try:
            home_strength = strengths[m.home_team]
            away_strength = strengths[m.away_team]
        except KeyError as e:
            raise ReferentialError(f"No strength for team {e.args[0]} in match {m.id}") from e
        outcome = simulate_score(home_strength, away_strength, rng=rng)
        apply_result(table, m.home_team, m.away_team, outcome.home_goals, outcome.away_goals)

    logger.debug("Projected %d remaining matches", len(remaining))
    return finalize_table(table)
