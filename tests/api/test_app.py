"""
Test suite for the assembled application.

Checks mount prefix, middleware ordering and the CORS/correlation bypass for
proxied LRS paths.

System role: Verification of application wiring
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from session_gateway.api.deps import (
    get_launch_service,
    get_lrs_proxy_service,
    get_session_service,
)
from session_gateway.api.passthrough import is_passthrough_path
from session_gateway.core.exceptions import NotFoundError
from session_gateway.core.proxy_pipeline import ProxiedResponse
from session_gateway.main import create_app
from session_gateway.observability.middleware import CORRELATION_HEADER

PREFLIGHT_HEADERS = {
    "Origin": "https://content.example",
    "Access-Control-Request-Method": "PUT",
}


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def mock_lrs_service(app):
    async def body():
        yield b""

    service = AsyncMock()
    service.forward.return_value = ProxiedResponse(
        status_code=204,
        reason_phrase="No Content",
        headers=[("Access-Control-Allow-Origin", "https://lrs-owned.example")],
        body=body(),
        close=AsyncMock(),
    )
    app.dependency_overrides[get_lrs_proxy_service] = lambda: service
    return service


@pytest.mark.parametrize(
    "path,expected",
    [
        ("/api/v1/sessions/1/lrs/statements", True),
        ("/api/v1/sessions/1/lrs", True),
        ("/sessions/abc/lrs/activities/state", True),
        ("/api/v1/sessions/1", False),
        ("/api/v1/sessions/1/events", False),
        ("/api/v1/sessions/1/lrsx", False),
    ],
)
def test_is_passthrough_path(path, expected):
    assert is_passthrough_path(path) is expected


def test_health_is_mounted_under_api_prefix(client):
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.headers[CORRELATION_HEADER]


def test_correlation_id_is_echoed(client):
    response = client.get("/api/v1/health", headers={CORRELATION_HEADER: "req-123"})

    assert response.headers[CORRELATION_HEADER] == "req-123"


def test_gateway_routes_answer_cors_preflight(client):
    response = client.options("/api/v1/sessions/1", headers=PREFLIGHT_HEADERS)

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


def test_lrs_preflight_reaches_upstream(client, mock_lrs_service):
    response = client.options("/api/v1/sessions/1/lrs/statements", headers=PREFLIGHT_HEADERS)

    assert response.status_code == 204
    assert response.headers["access-control-allow-origin"] == "https://lrs-owned.example"
    assert CORRELATION_HEADER.lower() not in response.headers
    request = mock_lrs_service.forward.call_args.args[0]
    assert request.method == "OPTIONS"


def test_lrs_response_has_no_gateway_cors_headers(client, mock_lrs_service):
    mock_lrs_service.forward.return_value.headers = []

    response = client.get(
        "/api/v1/sessions/1/lrs/statements",
        headers={"Origin": "https://content.example"},
    )

    assert response.status_code == 204
    assert "access-control-allow-origin" not in response.headers


def test_unknown_session_maps_to_404(client, app):
    service = AsyncMock()
    service.get_session.side_effect = NotFoundError("session", 999)
    app.dependency_overrides[get_session_service] = lambda: service

    response = client.get("/api/v1/sessions/999")

    assert response.status_code == 404


def test_launch_url_base_includes_api_prefix(client, app):
    service = AsyncMock()
    service.create_session.return_value = {
        "id": 1,
        "tenant_id": 1,
        "registration_id": 42,
        "metadata": {},
        "launch_url": "https://player/launch",
    }
    app.dependency_overrides[get_launch_service] = lambda: service

    response = client.post("/api/v1/sessions", json={"testId": 42, "auIndex": 0})

    assert response.status_code == 200
    service.create_session.assert_called_once_with(
        registration_id=42,
        au_index=0,
        gateway_base="http://testserver/api/v1",
    )
