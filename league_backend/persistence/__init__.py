"""
Persistence layer for league data.
No business logic, no simulation: only read/write interfaces.
"""
from .db import get_connection, init_db, transaction
from .repositories import (
    LeagueRepository,
    TeamRepository,
    MatchRepository,
)

__all__ = [
    "get_connection",
    "init_db",
    "transaction",
    "LeagueRepository",
    "TeamRepository",
    "MatchRepository",
]
