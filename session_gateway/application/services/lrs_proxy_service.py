"""
LRS reverse proxy service.

Forwards xAPI traffic for a session to the Player's LRS endpoint recorded at
launch time, announcing each request on the session's event stream before
it is dispatched.

Dependencies: httpx, session_gateway.core.proxy_pipeline
System role: LRS Reverse Proxy use case
"""

import logging

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from session_gateway.boundary.db.CRUD.session_crud import session_crud
from session_gateway.core.event_hub import EventHub
from session_gateway.core.exceptions import NotFoundError, PersistenceError, UpstreamError
from session_gateway.core.proxy_pipeline import ProxiedResponse, ProxyPipeline, ProxyRequest
from session_gateway.models.events import LrsTrafficEvent

logger = logging.getLogger(__name__)

PREFLIGHT_METHOD = "OPTIONS"


def build_upstream_url(endpoint: str, resource: str, query_string: str = "") -> str:
    """Join an LRS base URL, resource path and raw query string."""
    url = f"{endpoint.rstrip('/')}/{resource.lstrip('/')}"
    return f"{url}?{query_string}" if query_string else url


class LrsProxyPipeline(ProxyPipeline):
    """Pipeline strategy for ``/sessions/{id}/lrs/{resource}``."""

    upstream_label = "LRS"

    def __init__(self, db: AsyncSession, event_hub: EventHub) -> None:
        self.db = db
        self.event_hub = event_hub

    async def resolve_upstream(self, request: ProxyRequest) -> str:
        """
        Look up the session's LRS endpoint.

        Knowing a valid session id is the only credential for this route,
        so the lookup runs before anything is forwarded.

        Raises:
            NotFoundError: Unknown session
        """
        try:
            session_id = int(request.session_id)
        except ValueError:
            raise NotFoundError("session", request.session_id) from None

        try:
            session = await session_crud.get_by_id(self.db, session_id)
        except Exception as e:
            raise PersistenceError(f"Failed to select session data: {e}", operation="select") from e

        if session is None:
            raise NotFoundError("session", request.session_id)
        endpoint = session.upstream_endpoint
        # the upstream exchange may stream for a long time, release the connection first
        await self.db.close()
        if not endpoint:
            raise UpstreamError(f"Session {request.session_id} has no LRS endpoint")

        return build_upstream_url(endpoint, request.resource, request.query_string)

    async def before_forward(self, request: ProxyRequest) -> None:
        if request.method.upper() == PREFLIGHT_METHOD:
            return

        self.event_hub.publish(
            request.session_id,
            None,
            LrsTrafficEvent(method=request.method.lower(), resource=request.resource).to_payload(),
        )


class LrsProxyService:
    """LRS Reverse Proxy orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        event_hub: EventHub,
        http_client: httpx.AsyncClient,
    ) -> None:
        self.pipeline = LrsProxyPipeline(db, event_hub)
        self.http_client = http_client

    async def forward(self, request: ProxyRequest) -> ProxiedResponse:
        """
        Proxy one LRS request.

        Args:
            request: Incoming request description

        Returns:
            ProxiedResponse: Upstream response; caller must await ``close``

        Raises:
            NotFoundError: Unknown session
            UpstreamError: Upstream transport failure
        """
        response = await self.pipeline.run(request, self.http_client)
        logger.debug(
            "LRS request proxied",
            extra={
                "session_id": request.session_id,
                "method": request.method,
                "resource": request.resource,
                "status_code": response.status_code,
                "reason_phrase": response.reason_phrase,
            },
        )
        return response
