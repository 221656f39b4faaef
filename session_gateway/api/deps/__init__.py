"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    get_event_hub,
    get_fetch_relay_service,
    get_http_client,
    get_launch_service,
    get_lrs_proxy_service,
    get_player_client,
    get_session_service,
    get_settings_dependency,
)

__all__ = [
    "get_event_hub",
    "get_fetch_relay_service",
    "get_http_client",
    "get_launch_service",
    "get_lrs_proxy_service",
    "get_player_client",
    "get_session_service",
    "get_settings_dependency",
]
