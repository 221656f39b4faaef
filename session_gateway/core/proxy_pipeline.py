"""
Reverse proxy pipeline.

Models a proxied request as three explicit stages so each proxied route can
plug in a small strategy object:

- resolve_upstream: map the incoming request to the upstream URL
- before_forward: side effects that must happen before dispatch
- after_response: translate the upstream response for the caller

Dependencies: httpx
System role: Request forwarding shared by proxied routes
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import AsyncIterator, Awaitable, Callable

import httpx

from session_gateway.core.exceptions import UpstreamError

logger = logging.getLogger(__name__)

# Never forwarded in either direction by a proxy
HOP_BY_HOP_HEADERS = frozenset({
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailer",
    "trailers",
    "transfer-encoding",
    "upgrade",
})


@dataclass
class ProxyRequest:
    """
    Incoming request to be proxied.

    Attributes:
        session_id: Session the request is scoped to
        resource: Path below the proxied mount point (e.g. "statements")
        method: HTTP method, upper case
        query_string: Raw query string without the leading "?"
        headers: Request headers as (name, value) pairs
        body: Raw request body
        client_host: Caller address for X-Forwarded-For
        scheme: Scheme the caller used
        host: Host header the caller used
        port: Port the caller connected to
    """

    session_id: str
    resource: str
    method: str
    query_string: str = ""
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: bytes = b""
    client_host: str | None = None
    scheme: str = "http"
    host: str | None = None
    port: int | None = None


@dataclass
class ProxiedResponse:
    """
    Upstream response ready to be relayed to the caller.

    ``close`` releases the upstream connection and must run once the body
    has been fully sent (or abandoned).
    """

    status_code: int
    reason_phrase: str
    headers: list[tuple[str, str]]
    body: AsyncIterator[bytes]
    close: Callable[[], Awaitable[None]]


class ProxyPipeline(ABC):
    """
    Strategy for one proxied route.

    Subclasses implement ``resolve_upstream`` and may override the other
    stages. ``run`` executes the stages in order against a shared httpx client.
    """

    #: label used in upstream failure messages
    upstream_label: str = "Upstream"

    #: response headers dropped before relaying
    excluded_response_headers: frozenset[str] = frozenset({"transfer-encoding"})

    @abstractmethod
    async def resolve_upstream(self, request: ProxyRequest) -> str:
        """Return the absolute upstream URL for the request."""

    async def before_forward(self, request: ProxyRequest) -> None:
        """Hook run after resolution and before the upstream request is sent."""

    async def after_response(
        self,
        request: ProxyRequest,
        upstream: httpx.Response,
    ) -> ProxiedResponse:
        """
        Translate the upstream response verbatim.

        Status code and reason phrase are copied, headers are copied except
        ``excluded_response_headers``, and the body is streamed undecoded so
        any ``content-encoding`` header stays accurate.
        """
        headers = [
            (name, value)
            for name, value in upstream.headers.multi_items()
            if name.lower() not in self.excluded_response_headers
        ]
        return ProxiedResponse(
            status_code=upstream.status_code,
            reason_phrase=upstream.reason_phrase,
            headers=headers,
            body=upstream.aiter_raw(),
            close=upstream.aclose,
        )

    def forward_headers(self, request: ProxyRequest) -> dict[str, str]:
        """
        Build upstream request headers.

        Drops hop-by-hop headers, ``host`` and ``content-length`` (recomputed
        by the client) and appends the X-Forwarded-* family.
        """
        headers: dict[str, str] = {}
        for name, value in request.headers:
            lowered = name.lower()
            if lowered in HOP_BY_HOP_HEADERS or lowered in ("host", "content-length"):
                continue
            if lowered in headers:
                headers[lowered] = f"{headers[lowered]}, {value}"
            else:
                headers[lowered] = value

        if request.client_host:
            prior = headers.get("x-forwarded-for")
            headers["x-forwarded-for"] = (
                f"{prior},{request.client_host}" if prior else request.client_host
            )
        if request.port is not None:
            headers.setdefault("x-forwarded-port", str(request.port))
        headers.setdefault("x-forwarded-proto", request.scheme)
        if request.host:
            headers.setdefault("x-forwarded-host", request.host)
        return headers

    async def run(self, request: ProxyRequest, client: httpx.AsyncClient) -> ProxiedResponse:
        """
        Execute the pipeline for one request.

        Args:
            request: Incoming request description
            client: Shared async HTTP client

        Returns:
            ProxiedResponse: Response to relay; caller must await ``close``

        Raises:
            NotFoundError: Propagated from resolve_upstream
            UpstreamError: Upstream transport failure
        """
        url = await self.resolve_upstream(request)
        await self.before_forward(request)

        upstream_request = client.build_request(
            request.method,
            url,
            headers=self.forward_headers(request),
            content=request.body,
        )
        try:
            upstream = await client.send(upstream_request, stream=True)
        except httpx.HTTPError as e:
            logger.warning(
                "Upstream request failed",
                extra={"session_id": request.session_id, "url": url, "error": str(e)},
            )
            raise UpstreamError(f"{self.upstream_label} request failed: {e}") from e

        try:
            return await self.after_response(request, upstream)
        except Exception:
            await upstream.aclose()
            raise
