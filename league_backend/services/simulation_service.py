"""
Pure match outcome simulation: no persistence, no UI.
Callable by week execution in the league service or by the projection engine.

Goals are a bounded uniform draw driven by team strength. The home side gets a
fixed strength bonus before its bound is computed.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from league_backend.services.errors import ConfigurationError
from league_backend.simulation.rng import process_rng

HOME_ADVANTAGE = 10
GOALS_DIVISOR = 20


@dataclass(frozen=True)
class MatchOutcome:
    home_goals: int
    away_goals: int

    def to_dict(self) -> dict[str, int]:
        return {"home_goals": self.home_goals, "away_goals": self.away_goals}


def goal_upper_bounds(home_strength: int, away_strength: int) -> tuple[int, int]:
    """Inclusive maximum goals for (home, away). A bound of 0 means the side cannot score."""
    if home_strength < 0 or away_strength < 0:
        raise ConfigurationError(
            f"Strengths must be non-negative (home={home_strength}, away={away_strength})"
        )
    home_max = (home_strength + HOME_ADVANTAGE) // GOALS_DIVISOR
    away_max = away_strength // GOALS_DIVISOR
    return home_max, away_max


def simulate_score(home_strength: int, away_strength: int, rng: Any | None = None) -> MatchOutcome:
    """
    Draw goals for both sides independently and uniformly from [0, bound].
    rng: anything with randint(a, b); defaults to the process-wide SeededRNG.
    Does not record the result anywhere.
    """
    home_max, away_max = goal_upper_bounds(home_strength, away_strength)
    source = rng if rng is not None else process_rng()
    return MatchOutcome(
        home_goals=source.randint(0, home_max),
        away_goals=source.randint(0, away_max),
    )
