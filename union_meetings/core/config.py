"""Application configuration via environment variables."""
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or .env file."""
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Application
    app_name: str = "Union Meetings"
    debug: bool = False
    log_dir: Path = Path.home() / ".logs" / "union_meetings"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    allowed_origins: str = "*"  # Comma-separated origins, or "*" for all

    # Database
    database_url: str = "sqlite:///./union_meetings.db"

    # Civil time. Meetings are scheduled in local wall-clock time at a fixed
    # offset from UTC (no DST), e.g. -360 for UTC-06:00.
    utc_offset_minutes: int = -360

    # Optional backfill sweep (0 disables it; backfill then only runs on read)
    backfill_sweep_minutes: int = 0
    backfill_sweep_lookback_hours: int = 24


settings = Settings()
