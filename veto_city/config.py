"""
Application configuration.

Values are read from the environment and, when present, a ``.env`` file in
the project root. Every field can be overridden per deployment, e.g.
``LEAGUE_ID=1245800211851255808 uvicorn veto_city.main:app``.
"""
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings

PROJECT_ROOT = Path(__file__).parent.parent


class Settings(BaseSettings):
    """Runtime settings for the league history service."""

    model_config = ConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Veto City League API"
    APP_VERSION: str = "0.3.0"

    # Sleeper
    SLEEPER_API_URL: str = "https://api.sleeper.app/v1"
    LEAGUE_ID: str = "1245800211851255808"
    HTTP_TIMEOUT_SECONDS: float = 15.0
    MAX_CONCURRENT_REQUESTS: int = Field(16, ge=1)

    # Aggregation
    RESULT_CACHE_TTL_SECONDS: float = Field(60.0, ge=0)
    MAX_SEASON_CHAIN_DEPTH: int = Field(20, ge=1)
    RECORDS_WEEK_MIN: int = 1
    RECORDS_WEEK_MAX: int = 14
    TRANSACTION_WEEK_MAX: int = 18

    # CORS - comma-separated list of origins
    CORS_ORIGINS_STR: str = "http://localhost:3000,http://127.0.0.1:3000"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    @property
    def CORS_ORIGINS(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS_STR.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
