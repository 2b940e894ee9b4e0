"""
Tests for the league service: setup, week simulation, overrides, projections,
and all-or-nothing units of work against a temporary SQLite database.
"""
from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from league_backend.models import Team
from league_backend.persistence.db import get_connection, init_db, set_db_path
from league_backend.persistence.repositories import MatchRepository
from league_backend.services.errors import (
    ConfigurationError,
    MatchNotFoundError,
    RangeError,
)
from league_backend.services.league_service import LeagueService
from league_backend.services.simulation_service import goal_upper_bounds
from league_backend.simulation.rng import SeededRNG

TEAMS = [
    Team("Alpha FC", 85),
    Team("Bravo United", 70),
    Team("Charlie Town", 60),
    Team("Delta SC", 50),
]
WEEKS = 6


class ExplodingRNG:
    """Returns 1 for the first `fail_after` draws, then raises."""

    def __init__(self, fail_after: int) -> None:
        self._left = fail_after

    def randint(self, a: int, b: int) -> int:
        if self._left <= 0:
            raise RuntimeError("random source failed")
        self._left -= 1
        return min(1, b)


@pytest.fixture
def db_conn(tmp_path):
    """Temporary DB with the league schema."""
    db_path = tmp_path / "league_test.db"
    set_db_path(db_path)
    init_db(db_path=db_path)
    conn = get_connection()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture
def league_service():
    return LeagueService()


@pytest.fixture
def league(db_conn, league_service):
    return league_service.setup_league(db_conn, TEAMS, WEEKS, name="Test League")


def _snapshot(conn) -> list[dict]:
    return [m.to_dict() for m in MatchRepository().list_all(conn)]


# ---------- Setup & fixtures ----------


def test_setup_creates_roster_and_fixtures(league):
    assert league.name == "Test League"
    assert league.teams == TEAMS
    assert league.total_weeks == WEEKS
    assert len(league.matches) == 12
    assert all(not m.played and m.home_goals == 0 and m.away_goals == 0 for m in league.matches)
    assert league.validate() == []


def test_setup_is_idempotent(db_conn, league_service, league):
    league_service.simulate_week(db_conn, 1, rng=SeededRNG(1))
    before = _snapshot(db_conn)
    again = league_service.setup_league(db_conn, TEAMS, WEEKS, name="Test League")
    assert len(again.matches) == 12
    assert _snapshot(db_conn) == before


def test_setup_rejects_conflicting_configuration(db_conn, league_service, league):
    with pytest.raises(ConfigurationError):
        league_service.setup_league(db_conn, TEAMS, WEEKS + 1)
    with pytest.raises(ConfigurationError):
        league_service.setup_league(db_conn, TEAMS[:3], WEEKS)


@pytest.mark.parametrize("teams,weeks", [
    ([Team("Solo", 50)], 3),
    (TEAMS, 0),
    ([Team("A", 50), Team("A", 60)], 2),
    ([Team("A", 0), Team("B", 60)], 2),
    ([Team("A", 101), Team("B", 60)], 2),
])
def test_setup_rejects_invalid_roster(db_conn, league_service, teams, weeks):
    with pytest.raises(ConfigurationError):
        league_service.setup_league(db_conn, teams, weeks)


def test_operations_require_setup(db_conn, league_service):
    with pytest.raises(ConfigurationError):
        league_service.standings(db_conn)


def test_regenerate_replaces_played_matches(db_conn, league_service, league):
    first = _snapshot(db_conn)
    league_service.simulate_all(db_conn, rng=SeededRNG(2))
    matches = league_service.regenerate_fixtures(db_conn)
    assert len(matches) == 12
    assert all(not m.played for m in matches)
    strip = lambda rows: [(r["home_team"], r["away_team"], r["week"]) for r in rows]
    assert strip(_snapshot(db_conn)) == strip(first)


# ---------- Listing ----------


def test_list_matches_by_week(db_conn, league_service, league):
    assert len(league_service.list_matches(db_conn)) == 12
    week3 = league_service.list_matches(db_conn, week=3)
    assert len(week3) == 4
    assert all(m.week == 3 for m in week3)
    assert league_service.list_matches(db_conn, week=6) == []


@pytest.mark.parametrize("week", [0, 7, -1])
def test_list_matches_week_out_of_range(db_conn, league_service, league, week):
    with pytest.raises(RangeError):
        league_service.list_matches(db_conn, week=week)


def test_list_teams_in_roster_order(db_conn, league_service, league):
    assert league_service.list_teams(db_conn) == TEAMS


# ---------- Simulation ----------


def test_simulate_week_only_touches_that_week(db_conn, league_service, league):
    played = league_service.simulate_week(db_conn, 3, rng=SeededRNG(5))
    assert len(played) == 4
    for m in league_service.list_matches(db_conn):
        assert m.played == (m.week == 3)


def test_simulate_week_twice_does_not_replay(db_conn, league_service, league):
    league_service.simulate_week(db_conn, 1, rng=SeededRNG(5))
    before = _snapshot(db_conn)
    assert league_service.simulate_week(db_conn, 1, rng=SeededRNG(6)) == []
    assert _snapshot(db_conn) == before


@pytest.mark.parametrize("week", [0, 7])
def test_simulate_week_out_of_range(db_conn, league_service, league, week):
    with pytest.raises(RangeError):
        league_service.simulate_week(db_conn, week)


def test_simulate_week_is_reproducible(tmp_path, league_service):
    results = []
    for run in range(2):
        db_path = tmp_path / f"run{run}.db"
        init_db(db_path=db_path)
        conn = get_connection(db_path)
        try:
            league_service.setup_league(conn, TEAMS, WEEKS)
            results.append([m.to_dict() for m in league_service.simulate_week(conn, 3, rng=SeededRNG(77))])
        finally:
            conn.close()
    assert results[0] == results[1]


def test_simulate_all_plays_everything(db_conn, league_service, league):
    played = league_service.simulate_all(db_conn, rng=SeededRNG(9))
    assert len(played) == 12
    rows = league_service.standings(db_conn)
    assert all(s.played == 6 for s in rows)
    for m in league_service.list_matches(db_conn):
        assert m.played


def test_failed_simulate_all_commits_nothing(db_conn, league_service, league):
    """Four draws succeed (two matches), then the source fails: no match is left played."""
    with pytest.raises(RuntimeError):
        league_service.simulate_all(db_conn, rng=ExplodingRNG(fail_after=4))
    assert all(not m.played for m in league_service.list_matches(db_conn))


def test_failed_simulate_week_commits_nothing(db_conn, league_service, league):
    with pytest.raises(RuntimeError):
        league_service.simulate_week(db_conn, 3, rng=ExplodingRNG(fail_after=3))
    assert all(not m.played for m in league_service.list_matches(db_conn, week=3))


# ---------- Override ----------


def test_override_marks_played_and_rewrites(db_conn, league_service, league):
    target = league_service.list_matches(db_conn)[0]
    updated = league_service.override_result(db_conn, target.id, 2, 1)
    assert updated.played and (updated.home_goals, updated.away_goals) == (2, 1)
    rewritten = league_service.override_result(db_conn, target.id, 0, 0)
    assert rewritten.played and (rewritten.home_goals, rewritten.away_goals) == (0, 0)
    table = {s.team_name: s for s in league_service.standings(db_conn)}
    assert table[target.home_team].draws == 1
    assert table[target.away_team].draws == 1


def test_override_negative_goals(db_conn, league_service, league):
    target = league_service.list_matches(db_conn)[0]
    with pytest.raises(RangeError):
        league_service.override_result(db_conn, target.id, -1, 0)
    assert not league_service.list_matches(db_conn)[0].played


def test_override_unknown_match(db_conn, league_service, league):
    with pytest.raises(MatchNotFoundError):
        league_service.override_result(db_conn, 9999, 1, 0)


# ---------- Tables ----------


def test_standings_before_any_match(db_conn, league_service, league):
    rows = league_service.standings(db_conn)
    assert [s.team_name for s in rows] == [t.name for t in TEAMS]
    assert all(s.points == 0 and s.played == 0 for s in rows)


def test_projection_does_not_write(db_conn, league_service, league):
    league_service.simulate_week(db_conn, 1, rng=SeededRNG(4))
    before = _snapshot(db_conn)
    rows = league_service.projected_standings(db_conn, rng=SeededRNG(4))
    assert all(s.played == 6 for s in rows)
    assert _snapshot(db_conn) == before
    league_service.projected_standings(db_conn)
    assert _snapshot(db_conn) == before


# ---------- Concurrent simulation ----------


class InterleavingRNG:
    """
    On its first draw, tries to simulate week 1 from a second connection, as a
    concurrent request would. Always returns the upper bound.
    """

    def __init__(self, db_path: Path, service: LeagueService) -> None:
        self._db_path = db_path
        self._service = service
        self.other_blocked: bool | None = None

    def randint(self, a: int, b: int) -> int:
        if self.other_blocked is None:
            other = get_connection(self._db_path)
            other.execute("PRAGMA busy_timeout = 50")
            try:
                self._service.simulate_week(other, 1, rng=SeededRNG(0))
                self.other_blocked = False
            except sqlite3.OperationalError:
                self.other_blocked = True
            finally:
                other.close()
        return b


def test_concurrent_simulate_week_is_exclusive(tmp_path, db_conn, league_service, league):
    """A second simulation of the same week cannot run while the first holds it."""
    rng = InterleavingRNG(tmp_path / "league_test.db", league_service)
    played = league_service.simulate_week(db_conn, 1, rng=rng)
    assert rng.other_blocked is True
    assert len(played) == 2
    strengths = {t.name: t.strength for t in TEAMS}
    for m in league_service.list_matches(db_conn, week=1):
        assert m.played
        assert (m.home_goals, m.away_goals) == goal_upper_bounds(strengths[m.home_team], strengths[m.away_team])
    assert league_service.simulate_week(db_conn, 1, rng=SeededRNG(3)) == []


def test_simulated_result_never_overwrites_played_match(db_conn, league_service, league):
    target = league_service.list_matches(db_conn, week=1)[0]
    league_service.override_result(db_conn, target.id, 3, 3)
    repo = MatchRepository()
    assert repo.record_simulated_result(db_conn, target.id, 0, 1) is False
    db_conn.commit()
    stored = repo.get(db_conn, target.id)
    assert (stored.home_goals, stored.away_goals, stored.played) == (3, 3, True)


def test_simulate_all_loops_remaining_weeks_only(db_conn, league_service, league):
    league_service.simulate_week(db_conn, 3, rng=SeededRNG(1))
    played = league_service.simulate_all(db_conn, rng=SeededRNG(2))
    assert len(played) == 8
    assert {m.week for m in played} == {1, 2, 4, 5}
    assert league_service.get_league(db_conn).remaining_weeks() == []
