"""
CORS configuration settings.

Dependencies: pydantic_settings
System role: Cross-origin policy for the client-facing API
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from session_gateway.configs.base import BaseSettings


class CorsSettings(BaseSettings):
    """Cross-origin configuration for non-proxied routes."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CORS_",
        case_sensitive=False,
        extra="ignore",
    )

    allow_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to call the gateway API",
    )
