"""Application configuration loaded from environment variables (prefix LEAGUE_)."""
from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from league_backend.models import STRENGTH_MAX, STRENGTH_MIN

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


class TeamConfig(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    strength: int = Field(..., ge=STRENGTH_MIN, le=STRENGTH_MAX)


DEFAULT_TEAMS = [
    TeamConfig(name="Alpha FC", strength=85),
    TeamConfig(name="Bravo United", strength=70),
    TeamConfig(name="Charlie Town", strength=60),
    TeamConfig(name="Delta SC", strength=50),
]


class AppConfig(BaseSettings):
    """League configuration. Roster and week count are fixed for the life of the database."""

    model_config = SettingsConfigDict(
        env_prefix="LEAGUE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    db_path: Path = Field(
        default_factory=lambda: _project_root() / "data" / "league.db",
        description="SQLite database file",
    )
    league_name: str = Field(
        default="Premier Simulation League",
        min_length=1,
        description="Display name stored with the league",
    )
    total_weeks: int = Field(
        default=6,
        ge=1,
        description="Number of weeks fixtures are spread across",
    )
    teams: list[TeamConfig] = Field(
        default_factory=lambda: list(DEFAULT_TEAMS),
        description="Ordered roster; JSON list of {name, strength} when set from the environment",
    )
    random_seed: int | None = Field(
        default=None,
        description="Seed for the process-wide simulation RNG; unset = OS entropy",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    cors_origins: list[str] = Field(
        default=[
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ],
        description="Origins allowed by the API CORS middleware",
    )

    @field_validator("teams")
    @classmethod
    def validate_teams(cls, v: list[TeamConfig]) -> list[TeamConfig]:
        """A league needs at least two uniquely named teams."""
        if len(v) < 2:
            raise ValueError("at least 2 teams are required")
        names = [t.name for t in v]
        if len(set(names)) != len(names):
            raise ValueError("team names must be unique")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {v}")
        return level


_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get or create the singleton AppConfig instance."""
    global _config
    if _config is None:
        _config = AppConfig()
    return _config


def reset_config() -> None:
    """Drop the cached config so the next get_config() rereads the environment."""
    global _config
    _config = None


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=level or get_config().log_level,
        format=LOG_FORMAT,
    )
