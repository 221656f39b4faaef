"""
Session API endpoints.

Routes:
- POST /sessions - Launch an AU and create a session
- GET /sessions/{id} - Get session
- DELETE /sessions/{id} - Delete a course and its sessions (upstream delete first)
- GET /sessions/{id}/events - Live event stream (text/event-stream)
- POST /sessions/{id}/fetch - Relay the AU's fetch token call

Dependencies: session_gateway.application.services, session_gateway.models
System role: Session management HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse, StreamingResponse

from session_gateway.api.deps import (
    get_fetch_relay_service,
    get_launch_service,
    get_session_service,
    get_settings_dependency,
)
from session_gateway.api.errors import handle_session_errors
from session_gateway.application.services import (
    FetchRelayService,
    LaunchService,
    SessionService,
)
from session_gateway.configs import Settings
from session_gateway.models.session import CreateSessionRequest, SessionResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])

EVENT_STREAM_HEADERS = {
    "Content-Type": "text/event-stream",
    "Connection": "keep-alive",
    "Content-Encoding": "identity",
    "Cache-Control": "no-cache",
}


def gateway_base_url(request: Request, settings: Settings) -> str:
    """Scheme, host and API prefix the sessions routes are reachable under."""
    return f"{str(request.base_url).rstrip('/')}{settings.api_prefix}"


@router.post("", response_model=SessionResponse, response_model_exclude_none=True)
@handle_session_errors
async def create_session(
    payload: CreateSessionRequest,
    request: Request,
    launch_service: LaunchService = Depends(get_launch_service),
    settings: Settings = Depends(get_settings_dependency),
) -> SessionResponse:
    """
    Launch an AU for a registration.

    Args:
        payload: CreateSessionRequest with testId and auIndex
        request: Incoming request, source of the gateway base URL
        launch_service: Injected LaunchService
        settings: Application settings, source of the API prefix

    Returns:
        SessionResponse: Created session with the gateway-scoped launchUrl

    Raises:
        HTTPException(404): Registration not found
        HTTPException(500): Player or store failure
    """
    logger.info(
        "Creating session",
        extra={"registration_id": payload.test_id, "au_index": payload.au_index},
    )
    session_data = await launch_service.create_session(
        registration_id=payload.test_id,
        au_index=payload.au_index,
        gateway_base=gateway_base_url(request, settings),
    )
    return SessionResponse(**session_data)


@router.get("/{session_id}", response_model=SessionResponse, response_model_exclude_none=True)
@handle_session_errors
async def get_session(
    session_id: int,
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    """
    Get session by ID.

    Raises:
        HTTPException(404): Session not found
    """
    session_data = await session_service.get_session(session_id)
    return SessionResponse(**session_data)


@router.delete("/{course_id}", status_code=204)
@handle_session_errors
async def delete_session(
    course_id: int,
    session_service: SessionService = Depends(get_session_service),
) -> Response:
    """
    Delete a course with its registrations and sessions, upstream first.

    The path id names the local course row. The Player must confirm the
    course delete before anything local is removed.

    Returns:
        204 No Content on success

    Raises:
        HTTPException(404): Course not found
        HTTPException(500): Player refused the delete or local delete failed
    """
    await session_service.delete_by_course(course_id)
    return Response(status_code=204)


@router.get("/{session_id}/events")
@handle_session_errors
async def session_events(
    session_id: int,
    session_service: SessionService = Depends(get_session_service),
) -> StreamingResponse:
    """
    Stream live events for a session.

    The first frame is a ``control`` ``initialize`` event. When the observer
    disconnects a ``control`` ``end`` event is published and the channel is
    removed.

    Raises:
        HTTPException(404): Session not found
    """
    events = await session_service.open_event_stream(session_id)
    return StreamingResponse(events, headers=EVENT_STREAM_HEADERS)


@router.post("/{session_id}/fetch")
async def relay_fetch(
    session_id: str,
    fetch_service: FetchRelayService = Depends(get_fetch_relay_service),
) -> JSONResponse:
    """
    Relay the AU's fetch call to the Player.

    Never fails hard: errors are reported with the 400 error envelope,
    including a session id that is not a number.
    """
    status_code, body = await fetch_service.relay(session_id)
    return JSONResponse(status_code=status_code, content=body)
