"""
LRS proxy API endpoints.

Routes:
- GET|POST|PUT|DELETE|OPTIONS /sessions/{id}/lrs/{resource} - proxied to the
  session's upstream LRS

CORS handling is bypassed for these paths; the upstream LRS supplies its
own headers.

Dependencies: session_gateway.application.services.lrs_proxy_service
System role: LRS reverse proxy HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from session_gateway.api.deps import get_lrs_proxy_service
from session_gateway.api.errors import handle_session_errors
from session_gateway.application.services import LrsProxyService
from session_gateway.core.proxy_pipeline import ProxyRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["lrs"])

PROXIED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]


async def build_proxy_request(request: Request, session_id: str, resource: str) -> ProxyRequest:
    """Capture everything about the incoming request the proxy needs."""
    return ProxyRequest(
        session_id=session_id,
        resource=resource,
        method=request.method,
        query_string=request.url.query,
        headers=list(request.headers.items()),
        body=await request.body(),
        client_host=request.client.host if request.client else None,
        scheme=request.url.scheme,
        host=request.headers.get("host"),
        port=request.url.port,
    )


@router.api_route("/{session_id}/lrs/{resource:path}", methods=PROXIED_METHODS)
@handle_session_errors
async def proxy_lrs(
    session_id: str,
    resource: str,
    request: Request,
    lrs_service: LrsProxyService = Depends(get_lrs_proxy_service),
) -> StreamingResponse:
    """
    Proxy an xAPI request to the session's upstream LRS.

    Status code, headers (minus transfer-encoding) and body are relayed
    unchanged.

    Raises:
        HTTPException(404): Session not found
        HTTPException(500): Upstream LRS unreachable
    """
    proxy_request = await build_proxy_request(request, session_id, resource)
    proxied = await lrs_service.forward(proxy_request)

    response = StreamingResponse(
        proxied.body,
        status_code=proxied.status_code,
        background=BackgroundTask(proxied.close),
    )
    response.raw_headers = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in proxied.headers
    ]
    return response
