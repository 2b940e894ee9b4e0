"""
Domain errors raised by the fixture, simulation, and standings services.
The API layer maps these to HTTP status codes; nothing here is retried.
"""
from __future__ import annotations


class LeagueError(ValueError):
    """Base class for league domain errors."""


class ConfigurationError(LeagueError):
    """Invalid roster (size, duplicate names, strength) or week count."""


class ReferentialError(LeagueError):
    """A match names a team that is not in the roster."""


class RangeError(LeagueError):
    """Week outside [1, total_weeks] or a negative goal count."""


class MatchNotFoundError(LeagueError):
    """No match with the requested id."""
