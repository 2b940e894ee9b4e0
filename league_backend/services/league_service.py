"""
League service: setup, fixture generation, week simulation, standings.
Persistence is delegated to repositories; every mutation runs inside one
transaction so a failure leaves no partial fixtures or half-simulated weeks.
"""
from __future__ import annotations

import logging
import sqlite3
from typing import Any, Sequence

from league_backend.models import League, Match, Standing, Team, STRENGTH_MAX, STRENGTH_MIN
from league_backend.persistence.db import transaction
from league_backend.persistence.repositories import (
    LeagueRepository,
    MatchRepository,
    TeamRepository,
)
from league_backend.services.errors import (
    ConfigurationError,
    MatchNotFoundError,
    RangeError,
    ReferentialError,
)
from league_backend.services.projection import project_standings
from league_backend.services.scheduling import generate_fixtures
from league_backend.services.simulation_service import simulate_score
from league_backend.services.standings import compute_standings

logger = logging.getLogger(__name__)


def validate_roster(teams: Sequence[Team], total_weeks: int) -> None:
    """Raise ConfigurationError unless the roster and week count can form a league."""
    if len(teams) < 2:
        raise ConfigurationError(f"Need at least 2 teams (got {len(teams)})")
    if total_weeks < 1:
        raise ConfigurationError(f"Week count must be at least 1 (got {total_weeks})")
    names = [t.name for t in teams]
    if len(set(names)) != len(names):
        raise ConfigurationError("Team names must be unique")
    for t in teams:
        if not STRENGTH_MIN <= t.strength <= STRENGTH_MAX:
            raise ConfigurationError(
                f"Strength for {t.name} must be {STRENGTH_MIN}-{STRENGTH_MAX} (got {t.strength})"
            )


# ---------- LeagueService ----------


class LeagueService:
    """
    Domain operations for the single league stored in a database.
    Callers own the connection; the service owns the transactions.
    """

    def __init__(self) -> None:
        self._league_repo = LeagueRepository()
        self._team_repo = TeamRepository()
        self._match_repo = MatchRepository()

    # ---------- Setup & fixtures ----------

    def setup_league(
        self,
        conn: sqlite3.Connection,
        teams: Sequence[Team],
        total_weeks: int,
        name: str = "League",
    ) -> League:
        """
        Store the league and roster, then generate fixtures if none exist.
        Re-running with the same configuration is a no-op; a different roster or
        week count for an existing league is rejected.
        """
        validate_roster(teams, total_weeks)
        existing = self._league_repo.get(conn)
        if existing is not None:
            _, stored_weeks = existing
            stored_teams = self._team_repo.list_all(conn)
            if stored_weeks != total_weeks or stored_teams != list(teams):
                raise ConfigurationError(
                    "League already configured with a different roster or week count"
                )
            if self._match_repo.count(conn) > 0:
                return self.get_league(conn)

        with transaction(conn):
            if existing is None:
                self._league_repo.create(conn, name, total_weeks)
                for t in teams:
                    self._team_repo.create(conn, t.name, t.strength)
                logger.info("Created league %r with %d teams over %d weeks", name, len(teams), total_weeks)
            self._replace_fixtures(conn, [t.name for t in teams], total_weeks)
        return self.get_league(conn)

    def regenerate_fixtures(self, conn: sqlite3.Connection) -> list[Match]:
        """Discard every match (played or not) and rebuild the fixture list."""
        _, total_weeks, teams = self._require_league(conn)
        with transaction(conn):
            self._replace_fixtures(conn, [t.name for t in teams], total_weeks)
        return self._match_repo.list_all(conn)

    def _replace_fixtures(self, conn: sqlite3.Connection, team_names: list[str], total_weeks: int) -> None:
        fixtures = generate_fixtures(team_names, total_weeks)
        self._match_repo.delete_all(conn)
        self._match_repo.create_many(conn, fixtures)
        logger.info("Generated %d fixtures across %d weeks", len(fixtures), total_weeks)

    # ---------- Reads ----------

    def _require_league(self, conn: sqlite3.Connection) -> tuple[str, int, list[Team]]:
        settings = self._league_repo.get(conn)
        if settings is None:
            raise ConfigurationError("League has not been set up")
        name, total_weeks = settings
        return name, total_weeks, self._team_repo.list_all(conn)

    def get_league(self, conn: sqlite3.Connection) -> League:
        name, total_weeks, teams = self._require_league(conn)
        return League(
            name=name,
            teams=teams,
            total_weeks=total_weeks,
            matches=self._match_repo.list_all(conn),
        )

    def list_teams(self, conn: sqlite3.Connection) -> list[Team]:
        return self._team_repo.list_all(conn)

    def list_matches(self, conn: sqlite3.Connection, week: int | None = None) -> list[Match]:
        if week is None:
            return self._match_repo.list_all(conn)
        _, total_weeks, _ = self._require_league(conn)
        self._check_week(week, total_weeks)
        return self._match_repo.list_by_week(conn, week)

    @staticmethod
    def _check_week(week: int, total_weeks: int) -> None:
        if not 1 <= week <= total_weeks:
            raise RangeError(f"Week {week} is outside 1-{total_weeks}")

    # ---------- Simulation ----------

    def simulate_week(self, conn: sqlite3.Connection, week: int, rng: Any | None = None) -> list[Match]:
        """
        Simulate every unplayed match of one week in a single transaction.
        Already played matches are left as they are. Returns the simulated matches.
        """
        with transaction(conn):
            league = self.get_league(conn)
            self._check_week(week, league.total_weeks)
            simulated = self._simulate_week_in_tx(conn, week, league.strengths(), rng)
        logger.info("Week %d simulated: %d matches", week, len(simulated))
        return simulated

    def simulate_all(self, conn: sqlite3.Connection, rng: Any | None = None) -> list[Match]:
        """Simulate all remaining weeks in order, committed together or not at all."""
        simulated: list[Match] = []
        with transaction(conn):
            league = self.get_league(conn)
            weeks = league.remaining_weeks()
            for week in weeks:
                simulated.extend(self._simulate_week_in_tx(conn, week, league.strengths(), rng))
        logger.info("Simulated %d remaining matches across weeks %s", len(simulated), weeks)
        return simulated

    def _simulate_week_in_tx(
        self,
        conn: sqlite3.Connection,
        week: int,
        strengths: dict[str, int],
        rng: Any | None,
    ) -> list[Match]:
        result: list[Match] = []
        for m in self._match_repo.list_unplayed_by_week(conn, week):
            if m.home_team not in strengths or m.away_team not in strengths:
                raise ReferentialError(f"Match {m.id} references a team outside the roster")
            outcome = simulate_score(strengths[m.home_team], strengths[m.away_team], rng=rng)
            if not self._match_repo.record_simulated_result(conn, m.id, outcome.home_goals, outcome.away_goals):
                logger.warning("Match %d was already played; skipping", m.id)
                continue
            m.home_goals = outcome.home_goals
            m.away_goals = outcome.away_goals
            m.played = True
            logger.debug("Week %d: %s %d-%d %s", week, m.home_team, m.home_goals, m.away_goals, m.away_team)
            result.append(m)
        return result

    def override_result(
        self,
        conn: sqlite3.Connection,
        match_id: int,
        home_goals: int,
        away_goals: int,
    ) -> Match:
        """Set a match result by hand. Marks the match played; rewrites goals if it already was."""
        if home_goals < 0 or away_goals < 0:
            raise RangeError(f"Goals must be non-negative (got {home_goals}-{away_goals})")
        match = self._match_repo.get(conn, match_id)
        if match is None:
            raise MatchNotFoundError(f"Match not found: {match_id}")
        with transaction(conn):
            self._match_repo.update_result(conn, match_id, home_goals, away_goals)
        logger.info(
            "Match %d overridden: %s %d-%d %s", match_id, match.home_team, home_goals, away_goals, match.away_team
        )
        return self._match_repo.get(conn, match_id) or match

    # ---------- Tables ----------

    def standings(self, conn: sqlite3.Connection) -> list[Standing]:
        _, _, teams = self._require_league(conn)
        return compute_standings(teams, self._match_repo.list_all(conn))

    def projected_standings(self, conn: sqlite3.Connection, rng: Any | None = None) -> list[Standing]:
        """Final table if every remaining match were simulated now. Writes nothing."""
        _, _, teams = self._require_league(conn)
        return project_standings(teams, self._match_repo.list_all(conn), rng=rng)
