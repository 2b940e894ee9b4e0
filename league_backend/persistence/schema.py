"""
SQLite schema for league entities.
Migration-friendly: each table created with IF NOT EXISTS.
"""
from __future__ import annotations


def league_schema() -> str:
    """Single-row league settings (id = 1). One league per database."""
    return """
    CREATE TABLE IF NOT EXISTS league (
        id INTEGER PRIMARY KEY CHECK (id = 1),
        name TEXT NOT NULL,
        total_weeks INTEGER NOT NULL CHECK (total_weeks >= 1),
        created_at TEXT NOT NULL
    );
    """


def teams_schema() -> str:
    """Roster. Autoincrement id preserves configured order; name is the match join key."""
    return """
    CREATE TABLE IF NOT EXISTS teams (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL UNIQUE,
        strength INTEGER NOT NULL
    );
    """


def matches_schema() -> str:
    """Fixtures. played = 0 until simulated or overridden."""
    return """
    CREATE TABLE IF NOT EXISTS matches (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        home_team TEXT NOT NULL,
        away_team TEXT NOT NULL,
        home_goals INTEGER NOT NULL DEFAULT 0,
        away_goals INTEGER NOT NULL DEFAULT 0,
        played INTEGER NOT NULL DEFAULT 0,
        week INTEGER NOT NULL,
        FOREIGN KEY (home_team) REFERENCES teams(name),
        FOREIGN KEY (away_team) REFERENCES teams(name)
    );
    CREATE INDEX IF NOT EXISTS ix_matches_week ON matches(week);
    CREATE INDEX IF NOT EXISTS ix_matches_played ON matches(played);
    """


def all_schema_sql() -> str:
    """Combine all schema DDL for a single execution. Order: league, teams, matches."""
    return "\n".join([
        league_schema(),
        teams_schema(),
        matches_schema(),
    ])
