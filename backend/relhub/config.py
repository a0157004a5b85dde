"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - timezone is a valid IANA name (checked with zoneinfo at load time)

Design Decisions:
    - Defaults provided for every setting: a local SQLite file works out-of-the-box
"""

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "sqlite+aiosqlite:///./relhub.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres URLs come as postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 5
    database_max_overflow: int = 10

    # State
    state_key: str = "relhub-crm-state"
    seed_sample_contacts: bool = True
    upcoming_task_limit: int = 6

    # Calendar day boundaries ("today", overdue cutoff) use this zone
    timezone: str = "UTC"

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"unknown timezone {v!r}")
        return v

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


@lru_cache
def get_settings() -> Settings:
    return Settings()
