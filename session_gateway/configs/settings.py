"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from session_gateway.configs.base import BaseSettings
from session_gateway.configs.cors import CorsSettings
from session_gateway.configs.database import DatabaseSettings
from session_gateway.configs.player import PlayerSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    player: PlayerSettings = Field(default_factory=PlayerSettings)
    cors: CorsSettings = Field(default_factory=CorsSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from session_gateway.configs import get_settings
        settings = get_settings()
    """
    return Settings()
