"""
DevMatch — Application Configuration

Loads all configuration from environment variables (and an optional .env file)
using Pydantic Settings.  A cached ``get_settings()`` helper is provided so that
FastAPI dependency-injection (and any other call-site) always receives the same
validated instance without re-parsing the environment on every request.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Dict, List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the DevMatch API."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------ #
    # Database
    # ------------------------------------------------------------------ #
    DATABASE_URL: str

    # ------------------------------------------------------------------ #
    # Session tokens
    # ------------------------------------------------------------------ #
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    TOKEN_TTL_SECONDS: int = 3600
    SESSION_COOKIE_NAME: str = "token"

    # ------------------------------------------------------------------ #
    # Password hashing
    # ------------------------------------------------------------------ #
    BCRYPT_ROUNDS: int = 10

    # ------------------------------------------------------------------ #
    # Discovery feed pagination
    # ------------------------------------------------------------------ #
    FEED_DEFAULT_LIMIT: int = 10
    FEED_MAX_LIMIT: int = 50
    FEED_MAX_PAGE: int = 100_000

    # ------------------------------------------------------------------ #
    # Which profile fields each update route may touch
    # ------------------------------------------------------------------ #
    FIELD_PERMISSIONS: Dict[str, List[str]] = {
        "profile_edit": ["gender", "age", "about"],
        "password_change": ["password"],
    }

    # ------------------------------------------------------------------ #
    # Runtime environment
    # ------------------------------------------------------------------ #
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    REQUEST_TIMEOUT_SECONDS: float = 70.0

    # ------------------------------------------------------------------ #
    # CORS
    # ------------------------------------------------------------------ #
    ALLOWED_ORIGINS: str = "*"

    # ------------------------------------------------------------------ #
    # Derived helpers
    # ------------------------------------------------------------------ #
    @property
    def allowed_origins_list(self) -> list[str]:
        """Return ALLOWED_ORIGINS as a list split on commas."""
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",")]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    def allowed_fields(self, route: str) -> frozenset[str]:
        """Fields the named update route is permitted to change."""
        return frozenset(self.FIELD_PERMISSIONS.get(route, ()))

    @field_validator("TOKEN_TTL_SECONDS", "FEED_DEFAULT_LIMIT", "FEED_MAX_LIMIT", "FEED_MAX_PAGE")
    @classmethod
    def _must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"Value must be positive, got {v}")
        return v

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def _bcrypt_rounds_in_range(cls, v: int) -> int:
        if not 4 <= v <= 31:
            raise ValueError(f"BCRYPT_ROUNDS must be between 4 and 31, got {v}")
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached, validated ``Settings`` instance.

    Using ``@lru_cache`` guarantees the .env file is read and validated
    exactly once per process lifetime.  Import this function anywhere you
    need access to configuration::

        from app.config import get_settings
        settings = get_settings()
    """
    return Settings()  # type: ignore[call-arg]
