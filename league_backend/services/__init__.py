"""
Service layer: fixture generation, outcome simulation, standings, projection.
Pure modules (scheduling, simulation_service, standings, projection) never touch
persistence; league_service orchestrates them against the store.
"""
from .errors import (
    LeagueError,
    ConfigurationError,
    ReferentialError,
    RangeError,
    MatchNotFoundError,
)
from .scheduling import generate_fixtures, generate_league_schedule
from .simulation_service import MatchOutcome, simulate_score
from .standings import compute_standings
from .projection import project_standings
from .league_service import LeagueService

__all__ = [
    "LeagueError",
    "ConfigurationError",
    "ReferentialError",
    "RangeError",
    "MatchNotFoundError",
    "generate_fixtures",
    "generate_league_schedule",
    "MatchOutcome",
    "simulate_score",
    "compute_standings",
    "project_standings",
    "LeagueService",
]
