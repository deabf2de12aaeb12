"""
Application configuration loaded from environment variables.

All configuration is validated at startup to fail fast on misconfiguration.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with validation.

    All settings are loaded from environment variables with the same name.
    Use .env file for local development.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./empresas.db",
        description="SQLAlchemy async connection string (sqlite+aiosqlite or postgresql+asyncpg)"
    )
    database_echo: bool = Field(
        default=False,
        description="Echo SQL statements to the log"
    )
    database_pool_size: int = Field(
        default=5,
        ge=1,
        description="Connection pool size (ignored for SQLite)"
    )
    database_max_overflow: int = Field(
        default=10,
        ge=0,
        description="Extra connections beyond the pool size (ignored for SQLite)"
    )
    database_pool_timeout: int = Field(
        default=30,
        ge=1,
        description="Seconds to wait for a pooled connection (ignored for SQLite)"
    )

    # Demo data
    seed_demo_data: bool = Field(
        default=False,
        description="Load the demo companies and transfers on startup when the database is empty"
    )

    # Server
    debug: bool = Field(
        default=False,
        description="Enable debug mode with API docs and detailed error messages"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root log level"
    )

    @property
    def is_sqlite(self) -> bool:
        """True when the configured database is SQLite."""
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once at startup and cached for subsequent calls.
    This ensures consistent configuration across the application lifecycle.
    """
    return Settings()
