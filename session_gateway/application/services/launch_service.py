"""
Launch service orchestrator.

Brokers AU launches: asks the Player for a launch URL, records the session,
and hands the client a launch URL whose LRS and fetch endpoints point back at
the gateway.

Dependencies: session_gateway.boundary, session_gateway.core.url_rewriter
System role: Launch Broker use case
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from session_gateway.application.services.session_service import to_session_view
from session_gateway.boundary.db.CRUD.registration_crud import registration_crud
from session_gateway.boundary.db.CRUD.session_crud import session_crud
from session_gateway.boundary.player.client import PlayerClient
from session_gateway.core.exceptions import (
    NotFoundError,
    PersistenceError,
    UpstreamError,
    ValidationError,
)
from session_gateway.core.url_rewriter import (
    ENDPOINT_PARAM,
    FETCH_PARAM,
    gateway_session_urls,
    get_query_param,
    rewrite_query_params,
)

logger = logging.getLogger(__name__)


class LaunchService:
    """Launch Broker orchestrator."""

    def __init__(self, db: AsyncSession, player: PlayerClient) -> None:
        """
        Initialize launch service.

        Args:
            db: Async SQLAlchemy session
            player: Player API client
        """
        self.db = db
        self.player = player

    async def create_session(
        self,
        registration_id: int,
        au_index: int,
        gateway_base: str,
    ) -> dict:
        """
        Launch an AU for a registration and record the session.

        Args:
            registration_id: Local registration id
            au_index: Index of the AU within the course
            gateway_base: Scheme, host and mount prefix clients reach the gateway on

        Returns:
            dict: Session view with ``launch_url`` set to the gateway-scoped URL

        Raises:
            NotFoundError: Registration or its course reference missing
            ValidationError: Registration carries no learner actor
            UpstreamError: Player call failed
            PersistenceError: Session insert failed
        """
        registration = await registration_crud.get_with_course(self.db, registration_id)
        if registration is None or registration.course is None:
            raise NotFoundError("registration", registration_id)

        course = registration.course
        if not course.player_id:
            raise NotFoundError("course", course.id, {"reason": "missing player course id"})

        actor = (registration.registration_metadata or {}).get("actor")
        if not actor:
            raise ValidationError("Registration has no learner actor", field="actor")

        api_token = registration.tenant.player_api_token if registration.tenant else None
        launch = await self.player.request_launch_url(
            course.player_id,
            au_index,
            registration.code,
            actor,
            api_token=api_token,
        )

        upstream_launch_url = launch.get("url") if isinstance(launch, dict) else None
        if not upstream_launch_url:
            raise UpstreamError("Failed to retrieve AU launch URL: player response has no url")
        upstream_session_id = launch.get("id")

        try:
            session = await session_crud.create(
                self.db,
                tenant_id=registration.tenant_id,
                upstream_session_id=(
                    str(upstream_session_id) if upstream_session_id is not None else None
                ),
                registration_id=registration.id,
                upstream_launch_url=upstream_launch_url,
                upstream_endpoint=get_query_param(upstream_launch_url, ENDPOINT_PARAM),
                upstream_fetch=get_query_param(upstream_launch_url, FETCH_PARAM),
                session_metadata={},
            )
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(
                "Player session launched but local insert failed; upstream session orphaned",
                extra={
                    "registration_id": registration_id,
                    "upstream_session_id": upstream_session_id,
                    "error": str(e),
                },
            )
            raise PersistenceError(f"Failed to insert into sessions: {e}", operation="insert") from e

        launch_url = rewrite_query_params(
            upstream_launch_url,
            gateway_session_urls(gateway_base, session.id),
        )

        logger.info(
            "Session created",
            extra={
                "session_id": session.id,
                "registration_id": registration_id,
                "au_index": au_index,
            },
        )

        view = to_session_view(session)
        view["launch_url"] = launch_url
        return view
