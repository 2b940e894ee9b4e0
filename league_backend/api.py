"""
REST API for the league simulator.
Thin wrappers around the league service; domain errors become HTTP errors here.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager, contextmanager
from typing import Any, AsyncGenerator, Generator

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from league_backend.config import configure_logging, get_config
from league_backend.models import Team
from league_backend.persistence import get_connection, init_db
from league_backend.persistence.db import get_db_path
from league_backend.services.errors import (
    ConfigurationError,
    LeagueError,
    MatchNotFoundError,
    RangeError,
    ReferentialError,
)
from league_backend.services.league_service import LeagueService
from league_backend.simulation.rng import SeededRNG, reset_process_rng

logger = logging.getLogger(__name__)


@contextmanager
def db_conn() -> Generator:
    """Yield a DB connection, ensure close on exit."""
    conn = get_connection()
    try:
        yield conn
    finally:
        conn.close()


# ---------- Startup: ensure DB, roster, fixtures ----------
def _ensure_league() -> None:
    config = get_config()
    init_db(db_path=get_db_path())
    teams = [Team(name=t.name, strength=t.strength) for t in config.teams]
    with db_conn() as conn:
        LeagueService().setup_league(conn, teams, config.total_weeks, name=config.league_name)


# ---------- Lifespan ----------
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    configure_logging()
    reset_process_rng(get_config().random_seed)
    _ensure_league()
    logger.info("League API ready (db=%s)", get_db_path())
    yield


# ---------- FastAPI app ----------
app = FastAPI(
    title="League Simulator API",
    description="Fixtures, match simulation, standings and projections for a round-robin league",
    version="0.1.0",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------- Request models ----------


class SimulateRequest(BaseModel):
    seed: int | None = Field(default=None, description="RNG seed for reproducibility")


class UpdateMatchRequest(BaseModel):
    id: int = Field(..., ge=1)
    home_goals: int = Field(..., ge=0)
    away_goals: int = Field(..., ge=0)


def _rng(req: SimulateRequest | None) -> SeededRNG | None:
    if req is None or req.seed is None:
        return None
    return SeededRNG(req.seed)


def _http_error(e: LeagueError) -> HTTPException:
    """Map a domain error to the matching HTTP status."""
    if isinstance(e, MatchNotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ReferentialError):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, (RangeError, ConfigurationError)):
        return HTTPException(status_code=400, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


# ---------- Endpoints ----------


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/league")
def get_league() -> dict[str, Any]:
    """Name, week count, roster, full fixture list, and the weeks still to play."""
    with db_conn() as conn:
        try:
            league = LeagueService().get_league(conn)
        except LeagueError as e:
            raise _http_error(e)
        out = league.to_dict()
        out["remaining_weeks"] = league.remaining_weeks()
        return out


@app.get("/teams")
def list_teams() -> dict[str, Any]:
    """Roster in configured order."""
    with db_conn() as conn:
        teams = LeagueService().list_teams(conn)
        return {"teams": [t.to_dict() for t in teams]}


@app.get("/matches")
def list_matches(week: int | None = Query(default=None, description="Only matches of this week")) -> dict[str, Any]:
    with db_conn() as conn:
        try:
            matches = LeagueService().list_matches(conn, week=week)
        except LeagueError as e:
            raise _http_error(e)
        return {"matches": [m.to_dict() for m in matches]}


@app.post("/simulate/week/{week}")
def simulate_week(week: int, req: SimulateRequest | None = None) -> dict[str, Any]:
    """Simulate all unplayed matches of one week. All-or-nothing."""
    with db_conn() as conn:
        try:
            matches = LeagueService().simulate_week(conn, week, rng=_rng(req))
        except LeagueError as e:
            raise _http_error(e)
        return {
            "message": f"Week {week} simulated successfully",
            "matches": [m.to_dict() for m in matches],
        }


@app.post("/simulate/all")
def simulate_all(req: SimulateRequest | None = None) -> dict[str, Any]:
    """Simulate every remaining week in order. All-or-nothing."""
    with db_conn() as conn:
        try:
            matches = LeagueService().simulate_all(conn, rng=_rng(req))
        except LeagueError as e:
            raise _http_error(e)
        return {
            "message": "All weeks simulated successfully",
            "simulated": len(matches),
        }


@app.get("/standings")
def get_standings() -> dict[str, Any]:
    """Table from played matches: points desc, goal difference desc, then roster order."""
    with db_conn() as conn:
        try:
            rows = LeagueService().standings(conn)
        except LeagueError as e:
            raise _http_error(e)
        return {"standings": [s.to_dict() for s in rows]}


@app.get("/predict")
def predict_standings(seed: int | None = Query(default=None, description="RNG seed for reproducibility")) -> dict[str, Any]:
    """Projected final table. Remaining matches are simulated in memory only."""
    with db_conn() as conn:
        try:
            rows = LeagueService().projected_standings(conn, rng=SeededRNG(seed) if seed is not None else None)
        except LeagueError as e:
            raise _http_error(e)
        return {"standings": [s.to_dict() for s in rows]}


@app.post("/match/update")
def update_match(req: UpdateMatchRequest) -> dict[str, Any]:
    """Manual result override; marks the match played."""
    with db_conn() as conn:
        try:
            match = LeagueService().override_result(conn, req.id, req.home_goals, req.away_goals)
        except LeagueError as e:
            raise _http_error(e)
        return {"message": "Match updated successfully", "match": match.to_dict()}


@app.post("/fixtures/regenerate")
def regenerate_fixtures() -> dict[str, Any]:
    """Discard all matches and rebuild the fixture list from the roster."""
    with db_conn() as conn:
        try:
            matches = LeagueService().regenerate_fixtures(conn)
        except LeagueError as e:
            raise _http_error(e)
        return {"message": "Fixtures regenerated", "matches": len(matches)}
