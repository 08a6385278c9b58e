"""Configuration management for the school records API.

This module provides centralized configuration management using Pydantic BaseSettings
with environment variable support and caching for performance.

Flow Diagram: get_settings()
=============================
::
    ┌─────────────┐
    │  Call get_  │
    │  settings() │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Check cache  │
    │ (lru_cache)  │
    └──────┬──────┘
    HIT?  │
    ┌─────┴─────┐
    │ NO         │ YES
    ▼            ▼
┌─────────┐  ┌─────────┐
│ Create  │  │ Return  │
│ Settings│  │ cached  │
│ instance│  │ value   │
└─────────┘  └─────────┘

How to Use
===========
**Step 1: Import**::
    from school_api.config import get_settings

**Step 2: Get settings**::
    settings = get_settings()
    db_url = settings.database_url

Key Behaviours
===============
- Settings are cached after first access.
- Environment variables override defaults automatically.
- DATABASE_URL, when set, wins over the DB_* parts.

Classes:
    Settings:  Pydantic model for all configuration values.
"""

__all__ = ["Settings", "get_settings"]

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    APP_NAME: str = "school-api"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Database connection
    DATABASE_URL: str = ""
    DB_DRIVER: str = "postgresql+asyncpg"
    DB_HOST: str = "db"
    DB_PORT: int | None = None
    DB_USER: str = "schooluser"
    DB_PASSWORD: str = ""
    DB_NAME: str = "school"
    DB_POOL_SIZE: int = 10
    DB_CREATE_TABLES: bool = False

    # Record lifecycle
    SERIALIZE_MUTATIONS: bool = True
    DISTINCT_ERROR_STATUS: bool = False

    # HTTP server
    HOST: str = "0.0.0.0"
    PORT: int = 3500
    CORS_ORIGINS: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return URL.create(
            self.DB_DRIVER,
            username=self.DB_USER,
            password=self.DB_PASSWORD or None,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        ).render_as_string(hide_password=False)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
