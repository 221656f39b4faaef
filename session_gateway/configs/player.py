"""
Upstream Player configuration settings.

Connection parameters for the content-hosting Player service that issues
AU launch URLs and hosts the LRS/fetch endpoints proxied by the gateway.

Dependencies: pydantic, pydantic_settings
System role: Upstream service configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from session_gateway.configs.base import BaseSettings


class PlayerSettings(BaseSettings):
    """Player service configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PLAYER_",
        case_sensitive=False,
        extra="ignore",
    )

    base_url: str = Field(
        default="http://localhost:3398",
        description="Player service base URL (no trailing slash)",
    )
    key: str | None = Field(default=None, description="Player API key for basic auth")
    secret: str | None = Field(default=None, description="Player API secret for basic auth")
    timeout_seconds: float = Field(default=30.0, description="Upstream request timeout")
    connect_timeout_seconds: float = Field(default=10.0, description="Upstream connect timeout")
