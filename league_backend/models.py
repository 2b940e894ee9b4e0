"""
Data models for the league simulator.
Domain objects only; no persistence or API logic.

A league owns an ordered roster of teams, a fixed number of weeks, and the full
fixture list. Standings are derived from played matches on every query.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Strength rating bounds accepted at configuration time
STRENGTH_MIN = 1
STRENGTH_MAX = 100


# ---------- Team ----------
@dataclass(frozen=True)
class Team:
    """A club in the league. Name is the join key for matches."""
    name: str
    strength: int

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "strength": self.strength}


# ---------- Match (fixture) ----------
@dataclass
class Match:
    """
    A scheduled or played fixture.
    Created unplayed with 0-0; simulate or override sets goals and played=True.
    id is None until the store assigns one.
    """
    home_team: str
    away_team: str
    week: int
    home_goals: int = 0
    away_goals: int = 0
    played: bool = False
    id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "home_team": self.home_team,
            "away_team": self.away_team,
            "home_goals": self.home_goals,
            "away_goals": self.away_goals,
            "played": self.played,
            "week": self.week,
        }


# ---------- Standing ----------
@dataclass
class Standing:
    """One row of the league table. Derived, never stored."""
    team_name: str
    played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    points: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "team_name": self.team_name,
            "played": self.played,
            "wins": self.wins,
            "draws": self.draws,
            "losses": self.losses,
            "goals_for": self.goals_for,
            "goals_against": self.goals_against,
            "goal_difference": self.goal_difference,
            "points": self.points,
        }


# ---------- League ----------
@dataclass
class League:
    """
    Aggregate root: ordered roster, week count, full match set.
    Every unordered pair of teams meets twice (once at each home) and every
    match week lies in [1, total_weeks].
    """
    name: str
    teams: list[Team]
    total_weeks: int
    matches: list[Match] = field(default_factory=list)

    def team_names(self) -> list[str]:
        return [t.name for t in self.teams]

    def strengths(self) -> dict[str, int]:
        return {t.name: t.strength for t in self.teams}

    def remaining_weeks(self) -> list[int]:
        """Weeks that still have at least one unplayed match, ascending."""
        return sorted({m.week for m in self.matches if not m.played})

    def validate(self) -> list[str]:
        """Return invariant violations (empty when the fixture list is complete and in range)."""
        problems: list[str] = []
        names = self.team_names()
        expected = [(h, a) for h in names for a in names if h != a]
        expected_set = set(expected)
        seen: dict[tuple[str, str], int] = {}
        for m in self.matches:
            if not 1 <= m.week <= self.total_weeks:
                problems.append(f"match {m.home_team} v {m.away_team} has week {m.week} outside 1..{self.total_weeks}")
            key = (m.home_team, m.away_team)
            if key not in expected_set:
                problems.append(f"match {m.home_team} v {m.away_team} is not a pairing of two distinct roster teams")
            seen[key] = seen.get(key, 0) + 1
        for home, away in expected:
            count = seen.get((home, away), 0)
            if count != 1:
                problems.append(f"{home} v {away} scheduled {count} times")
        return problems

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "total_weeks": self.total_weeks,
            "teams": [t.to_dict() for t in self.teams],
            "matches": [m.to_dict() for m in self.matches],
        }
