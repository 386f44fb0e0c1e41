"""
Application settings using Pydantic.

Provides environment-based configuration loading with SITEDOG_ prefix.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SIMPLE_FIELDS = ["project", "role", "environment", "bought_at"]


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SITEDOG_",
        extra="ignore",
    )

    # Provider dictionary (None -> bundled data/dictionary.yml)
    dictionary_path: Path | None = None

    # Fields kept as passthrough scalars instead of being resolved to services
    simple_fields: list[str] = list(DEFAULT_SIMPLE_FIELDS)

    # Nesting limit for the resolution engine
    max_depth: int = 32

    # Logging
    log_level: str = "WARNING"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
