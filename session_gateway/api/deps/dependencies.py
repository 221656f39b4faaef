"""
Dependency injection container.

Factory functions for FastAPI dependencies. Process-wide resources (the
event hub and the upstream HTTP client) live on ``app.state`` and are
created and torn down by the application lifespan.

Dependencies: fastapi, session_gateway.configs, session_gateway.application, session_gateway.boundary
System role: DI container for service injection
"""

import httpx
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from session_gateway.application.services import (
    FetchRelayService,
    LaunchService,
    LrsProxyService,
    SessionService,
)
from session_gateway.boundary.db import get_async_db
from session_gateway.boundary.player import PlayerClient
from session_gateway.configs import Settings, get_settings
from session_gateway.core.event_hub import EventHub


def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_event_hub(request: Request) -> EventHub:
    """
    Get the application's event hub.

    Args:
        request: Incoming request (used to reach app.state)

    Returns:
        EventHub: Hub created at startup
    """
    return request.app.state.event_hub


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Get the shared upstream HTTP client created at startup."""
    return request.app.state.http_client


def get_player_client(
    http_client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings_dependency),
) -> PlayerClient:
    """
    Get Player API client.

    Args:
        http_client: Shared HTTP client (injected)
        settings: Application settings (injected)

    Returns:
        PlayerClient: Client bound to the configured Player base URL
    """
    return PlayerClient(http_client, settings.player)


def get_session_service(
    db: AsyncSession = Depends(get_async_db),
    player: PlayerClient = Depends(get_player_client),
    event_hub: EventHub = Depends(get_event_hub),
) -> SessionService:
    """
    Get session service instance.

    Args:
        db: Async database session (injected via Depends)
        player: Player API client (injected)
        event_hub: Event hub (injected)

    Returns:
        SessionService: Session service instance
    """
    return SessionService(db=db, player=player, event_hub=event_hub)


def get_launch_service(
    db: AsyncSession = Depends(get_async_db),
    player: PlayerClient = Depends(get_player_client),
) -> LaunchService:
    """
    Get launch service instance.

    Args:
        db: Async database session (injected via Depends)
        player: Player API client (injected)

    Returns:
        LaunchService: Launch service instance
    """
    return LaunchService(db=db, player=player)


def get_fetch_relay_service(
    db: AsyncSession = Depends(get_async_db),
    player: PlayerClient = Depends(get_player_client),
    event_hub: EventHub = Depends(get_event_hub),
) -> FetchRelayService:
    """Get fetch relay service instance."""
    return FetchRelayService(db=db, player=player, event_hub=event_hub)


def get_lrs_proxy_service(
    db: AsyncSession = Depends(get_async_db),
    event_hub: EventHub = Depends(get_event_hub),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> LrsProxyService:
    """Get LRS proxy service instance."""
    return LrsProxyService(db=db, event_hub=event_hub, http_client=http_client)
