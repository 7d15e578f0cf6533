"""
Forge - Configuration
Environment-driven settings for the store, the API and the analytics clock.
"""

from functools import lru_cache

import pytz
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    env: str = "dev"  # dev | prod
    db_url: str = "sqlite+aiosqlite:///./forge.db"
    cors_origins: list[str] = ["http://localhost:3000"]
    log_level: str = "INFO"

    # Day boundaries for logs and analytics are taken in this zone
    timezone: str = "UTC"

    # Populate an empty store with the starter habits on startup
    seed_sample_habits: bool = False

    # Share of the planned focus time that must elapse before a session counts
    focus_completion_ratio: float = 0.8

    class Config:
        env_file = ".env"
        env_prefix = "FORGE_"


settings = Settings()


@lru_cache()
def get_timezone():
    """
    Resolve the configured timezone once.
    Unknown names fall back to UTC.
    """
    try:
        return pytz.timezone(settings.timezone)
    except pytz.UnknownTimeZoneError:
        return pytz.utc
