"""
Repository interfaces for league data.
No business logic, only read/write operations. Writes are not committed here;
callers wrap them in persistence.db.transaction().
"""
from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import Iterable

from league_backend.models import Match, Team

_MATCH_COLS = "id, home_team, away_team, home_goals, away_goals, played, week"


def _row_to_match(r: sqlite3.Row) -> Match:
    return Match(
        id=r["id"],
        home_team=r["home_team"],
        away_team=r["away_team"],
        home_goals=r["home_goals"],
        away_goals=r["away_goals"],
        played=bool(r["played"]),
        week=r["week"],
    )


# ---------- LeagueRepository ----------


class LeagueRepository:
    """The single league settings row."""

    def get(self, conn: sqlite3.Connection) -> tuple[str, int] | None:
        """Return (name, total_weeks) or None if the league has not been set up."""
        row = conn.execute("SELECT name, total_weeks FROM league WHERE id = 1").fetchone()
        if row is None:
            return None
        return row["name"], row["total_weeks"]

    def create(self, conn: sqlite3.Connection, name: str, total_weeks: int) -> None:
        now = datetime.now(timezone.utc).isoformat()
        conn.execute(
            "INSERT INTO league (id, name, total_weeks, created_at) VALUES (1, ?, ?, ?)",
            (name, total_weeks, now),
        )


# ---------- TeamRepository ----------


class TeamRepository:
    """CRUD for teams. Roster order is insertion order."""

    def create(self, conn: sqlite3.Connection, name: str, strength: int) -> Team:
        conn.execute(
            "INSERT OR IGNORE INTO teams (name, strength) VALUES (?, ?)",
            (name, strength),
        )
        return self.get(conn, name) or Team(name=name, strength=strength)

    def get(self, conn: sqlite3.Connection, name: str) -> Team | None:
        row = conn.execute("SELECT name, strength FROM teams WHERE name = ?", (name,)).fetchone()
        if row is None:
            return None
        return Team(name=row["name"], strength=row["strength"])

    def list_all(self, conn: sqlite3.Connection) -> list[Team]:
        rows = conn.execute("SELECT name, strength FROM teams ORDER BY id").fetchall()
        return [Team(name=r["name"], strength=r["strength"]) for r in rows]


# ---------- MatchRepository ----------


class MatchRepository:
    """CRUD for fixtures."""

    def create_many(self, conn: sqlite3.Connection, fixtures: Iterable[tuple[int, str, str]]) -> int:
        """Insert unplayed (week, home, away) fixtures. Returns the number inserted."""
        cur = conn.executemany(
            "INSERT INTO matches (home_team, away_team, week) VALUES (?, ?, ?)",
            [(home, away, week) for week, home, away in fixtures],
        )
        return cur.rowcount

    def delete_all(self, conn: sqlite3.Connection) -> None:
        conn.execute("DELETE FROM matches")

    def count(self, conn: sqlite3.Connection) -> int:
        return conn.execute("SELECT COUNT(*) FROM matches").fetchone()[0]

    def get(self, conn: sqlite3.Connection, match_id: int) -> Match | None:
        row = conn.execute(
            f"SELECT {_MATCH_COLS} FROM matches WHERE id = ?",
            (match_id,),
        ).fetchone()
        if row is None:
            return None
        return _row_to_match(row)

    def list_all(self, conn: sqlite3.Connection) -> list[Match]:
        rows = conn.execute(f"SELECT {_MATCH_COLS} FROM matches ORDER BY id").fetchall()
        return [_row_to_match(r) for r in rows]

    def list_by_week(self, conn: sqlite3.Connection, week: int) -> list[Match]:
        rows = conn.execute(
            f"SELECT {_MATCH_COLS} FROM matches WHERE week = ? ORDER BY id",
            (week,),
        ).fetchall()
        return [_row_to_match(r) for r in rows]

    def list_unplayed_by_week(self, conn: sqlite3.Connection, week: int) -> list[Match]:
        rows = conn.execute(
            f"SELECT {_MATCH_COLS} FROM matches WHERE week = ? AND played = 0 ORDER BY id",
            (week,),
        ).fetchall()
        return [_row_to_match(r) for r in rows]

    def record_simulated_result(
        self,
        conn: sqlite3.Connection,
        match_id: int,
        home_goals: int,
        away_goals: int,
    ) -> bool:
        """Set goals only if the match is still unplayed. Returns False if it was already played."""
        cur = conn.execute(
            "UPDATE matches SET home_goals = ?, away_goals = ?, played = 1 WHERE id = ? AND played = 0",
            (home_goals, away_goals, match_id),
        )
        return cur.rowcount == 1

    def update_result(
        self,
        conn: sqlite3.Connection,
        match_id: int,
        home_goals: int,
        away_goals: int,
    ) -> None:
        conn.execute(
            "UPDATE matches SET home_goals = ?, away_goals = ?, played = 1 WHERE id = ?",
            (home_goals, away_goals, match_id),
        )
