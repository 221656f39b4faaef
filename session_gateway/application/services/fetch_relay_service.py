"""
Fetch relay service.

Relays a launched AU's fetch (auth token) call to the Player. Unlike the LRS
proxy this path never fails hard: every failure becomes the fixed error
envelope so a broken token refresh cannot take down a running session.

Dependencies: session_gateway.boundary, session_gateway.core.event_hub
System role: Fetch Relay use case
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from session_gateway.boundary.db.CRUD.session_crud import session_crud
from session_gateway.boundary.player.client import PlayerClient
from session_gateway.core.event_hub import EventHub
from session_gateway.core.exceptions import NotFoundError, PersistenceError, UpstreamError
from session_gateway.models.events import FetchEvent
from session_gateway.models.fetch import FetchErrorEnvelope

logger = logging.getLogger(__name__)

SOFT_FAILURE_STATUS = 400


class FetchRelayService:
    """Fetch Relay orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        player: PlayerClient,
        event_hub: EventHub,
    ) -> None:
        self.db = db
        self.player = player
        self.event_hub = event_hub

    async def relay(self, session_id: str) -> tuple[int, Any]:
        """
        Call the session's upstream fetch URL and relay the outcome.

        Args:
            session_id: Session id as it appeared in the path

        Returns:
            tuple: (status code, JSON body), either the Player's or the
            400 error envelope
        """
        try:
            try:
                lookup_id = int(session_id)
            except (TypeError, ValueError):
                raise NotFoundError("session", session_id) from None

            try:
                session = await session_crud.get_by_id(self.db, lookup_id)
            except Exception as e:
                raise PersistenceError(f"Failed to select session data: {e}", operation="select") from e

            if session is None:
                raise NotFoundError("session", session_id)
            if not session.upstream_fetch:
                raise UpstreamError("Session has no fetch url")

            status_code, body = await self.player.fetch(session.upstream_fetch)
        except Exception as e:
            logger.warning(
                "Fetch relay failed",
                extra={"session_id": session_id, "error": str(e)},
            )
            self.event_hub.publish(session_id, None, FetchEvent(error=str(e)).to_payload())
            return SOFT_FAILURE_STATUS, FetchErrorEnvelope.from_exception(e).model_dump(
                by_alias=True
            )

        self.event_hub.publish(
            session_id,
            None,
            FetchEvent(player_response_status_code=status_code).to_payload(),
        )
        return status_code, body
