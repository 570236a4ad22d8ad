"""
irtf_records.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide env-driven settings for the API, persistence, and schedule upload layers.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    One settings object shared by every layer; values come from `IRTF_*` env vars.
    """

    model_config = SettingsConfigDict(env_prefix="IRTF_", case_sensitive=False)

    # "dev" and "test" create tables on startup; "prod" relies on Alembic.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "irtf-records"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Feedback forms and the troublelog schedule tables live in separate databases.
    feedback_database_url: str = "sqlite+aiosqlite:///./feedback.db"
    troublelog_database_url: str = "sqlite+aiosqlite:///./troublelog.db"

    # Bulk-load source files are staged here before LOAD DATA INFILE.
    schedule_data_dir: Path = Path("./data/schedule")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Tests construct `Settings(...)` directly instead of going through the cache.
