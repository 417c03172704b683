"""
Centralized settings management using pydantic-settings.

All environment variables and configuration values are defined here.
Use get_settings() to access the singleton settings instance.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Optional environment variables:
        - REDIS_URL: Redis connection URL (default: redis://localhost:6379/0)
        - SEARCH_KEY_PREFIX / SEARCH_NAMESPACE: Root of every index key
        - EPHEMERAL_KEY_TTL_SECONDS: Lifetime of per-query temp keys
        - ENVIRONMENT: Environment name (development, staging, production)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================
    environment: str = Field(default="development", description="Environment name")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "prod")

    # ==========================================================================
    # Logging
    # ==========================================================================
    log_level: str = Field(default="INFO", description="Minimum log level")
    json_logs: bool = Field(default=False, description="Emit JSON log lines")

    @field_validator("log_level", mode="before")
    @classmethod
    def parse_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    # ==========================================================================
    # Redis Configuration
    # ==========================================================================
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL"
    )
    search_key_prefix: str = Field(
        default="search",
        description="Root segment of every search index key"
    )
    search_namespace: str = Field(
        default="challenge",
        description="Entity segment of every search index key"
    )
    ephemeral_key_ttl_seconds: int = Field(
        default=60,
        gt=0,
        description="TTL for union/intersection/range keys built while searching"
    )

    # ==========================================================================
    # Numeric Range Defaults
    # ==========================================================================
    prize_money_range_min: float = Field(
        default=0,
        description="Lower bound used when a prize money range omits min"
    )
    prize_money_range_max: float = Field(
        default=1_000_000,
        description="Upper bound used when a prize money range omits max"
    )
    participants_range_min: float = Field(
        default=0,
        description="Lower bound used when a participants range omits min"
    )
    participants_range_max: float = Field(
        default=1_000,
        description="Upper bound used when a participants range omits max"
    )

    # ==========================================================================
    # Search Behaviour
    # ==========================================================================
    default_sort_by: Optional[str] = Field(
        default="title",
        description="Sort field applied when a search omits sort_by (empty disables)"
    )
    default_sort_order: str = Field(
        default="asc",
        description="Sort order applied when a search omits order"
    )
    empty_filters_match_all: bool = Field(
        default=True,
        description="Whether a search without filters returns every indexed record"
    )

    @field_validator("default_sort_by", mode="before")
    @classmethod
    def parse_default_sort_by(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("default_sort_order", mode="before")
    @classmethod
    def parse_default_sort_order(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            if v not in ("asc", "desc"):
                raise ValueError(f"default_sort_order must be 'asc' or 'desc', got {v!r}")
        return v

    @property
    def key_root(self) -> str:
        return f"{self.search_key_prefix}:{self.search_namespace}"


@lru_cache
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Uses lru_cache to ensure only one instance is created.
    Settings are loaded from environment variables and .env file.

    Returns:
        Settings: The application settings instance
    """
    # Try to find .env file in project root
    env_file = Path(__file__).parent.parent.parent / ".env"
    if env_file.exists():
        os.environ.setdefault("ENV_FILE", str(env_file))

    return Settings(_env_file=env_file if env_file.exists() else None)


def get_settings_for_testing(**overrides) -> Settings:
    """
    Create a settings instance for testing with optional overrides.

    This bypasses the cache to allow different settings in tests.

    Args:
        **overrides: Setting values to override

    Returns:
        Settings: A new settings instance with overrides applied
    """
    test_defaults = {
        "environment": "testing",
    }
    test_defaults.update(overrides)

    return Settings(_env_file=None, **test_defaults)
