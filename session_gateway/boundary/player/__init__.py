"""Upstream Player service boundary."""

from session_gateway.boundary.player.client import PlayerClient, create_http_client

__all__ = ["PlayerClient", "create_http_client"]
