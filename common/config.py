"""Centralized application configuration using Pydantic settings."""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven configuration for the booking engine."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    database_url: str = Field(
        default="sqlite:///./shareit.db",
        description="SQLAlchemy database URL. Defaults to local SQLite for development.",
    )
    run_db_migrations: bool = Field(
        default=False,
        description="Whether init_db() should create the tables on startup.",
    )
    user_id_header: str = Field(
        default="X-Sharer-User-Id",
        description="Request header carrying the caller's numeric id",
    )
    default_page_size: int = Field(default=10, description="Page size used when the caller gives none")
    max_page_size: int = Field(default=100, description="Upper bound for a single listing page")
    log_dir: str = Field(default="logs", description="Directory for the booking audit log")
    log_level: str = Field(default="INFO", description="Level for the engine loggers")
    audit_log_enabled: bool = Field(default=True, description="Toggle the booking audit file (off in tests)")


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of the Settings object."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the cached Settings instance (useful for tests)."""

    get_settings.cache_clear()
