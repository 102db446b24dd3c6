"""
Application Configuration

This module provides type-safe configuration loading using Pydantic settings.
Environment variables are loaded from .env file and validated.

Usage:
    from tutor.config import settings

    # Access settings
    db_url = settings.DATABASE_URL or settings.POSTGRES_URL
    max_attempts = settings.MAX_ATTEMPTS
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings
from sqlalchemy.engine import make_url

from tutor.enums.api import RateLimitType


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "JS Tutor Exercise Tracker"
    DEBUG: bool = False

    # PostgreSQL
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "tutor"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "tutor"

    # Full SQLAlchemy URL, overrides the POSTGRES_* parts when set
    DATABASE_URL: str = ""

    @property
    def POSTGRES_URL(self) -> str:
        """Async PostgreSQL connection URL."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def POSTGRES_URL_SYNC(self) -> str:
        """Sync connection URL for Alembic migrations, same database as POSTGRES_URL."""
        if self.DATABASE_URL:
            # Drop the async driver: postgresql+asyncpg -> postgresql (psycopg2)
            url = make_url(self.DATABASE_URL)
            return url.set(drivername=url.get_backend_name()).render_as_string(
                hide_password=False
            )
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # LLM providers
    OPENAI_API_KEY: str = ""
    ANTHROPIC_API_KEY: str = ""
    GEMINI_API_KEY: str = ""

    # Models (LiteLLM format: provider/model-name)
    TEXT_MODEL: str = "gemini/gemini-2.5-flash"
    CODE_EVALUATION_MODEL: str = ""  # Falls back to TEXT_MODEL
    FEEDBACK_MODEL: str = ""  # Falls back to TEXT_MODEL

    # Sampling: grading stays deterministic, hints may vary
    CODE_EVALUATION_TEMPERATURE: float = 0.3
    FEEDBACK_TEMPERATURE: float = 0.7
    LLM_MAX_TOKENS: int = 2048
    LLM_TIMEOUT_SECONDS: float = 60.0
    LLM_MAX_ATTEMPTS: int = 1  # 1 = no retry

    # Exercise attempt rules
    MAX_ATTEMPTS: int = 3
    MASTERY_SCORE_THRESHOLD: float = 90.0
    COMPLETION_SCORE_THRESHOLD: float = 70.0

    # API access
    TUTOR_API_KEY: str = ""  # Empty = API key check disabled (dev mode)

    # Rate limiting (slowapi limit strings)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_DEFAULT: str = "100/minute"
    RATE_LIMIT_LLM_HEAVY: str = "10/minute"

    def get_rate_limit(self, rate_limit_type: RateLimitType) -> str:
        """Return the configured limit string for a rate limit category."""
        limits = {
            RateLimitType.DEFAULT: self.RATE_LIMIT_DEFAULT,
            RateLimitType.LLM_HEAVY: self.RATE_LIMIT_LLM_HEAVY,
        }
        return limits.get(rate_limit_type, self.RATE_LIMIT_DEFAULT)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()


@lru_cache()
def load_yaml_config() -> dict[str, Any]:
    """Load application configuration from config/default.yaml."""
    config_path = Path(__file__).parent.parent.parent.parent / "config" / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


yaml_config: dict[str, Any] = load_yaml_config()
