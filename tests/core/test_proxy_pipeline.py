"""
Test suite for the reverse proxy pipeline.

Uses a fixed-target pipeline against httpx.MockTransport to check stage
ordering, header forwarding and response translation.

System role: Verification of proxy request forwarding
"""

import httpx
import pytest

from session_gateway.core.exceptions import UpstreamError
from session_gateway.core.proxy_pipeline import ProxyPipeline, ProxyRequest


class FixedTargetPipeline(ProxyPipeline):
    """Pipeline forwarding everything to one URL and recording stage order."""

    upstream_label = "Test"

    def __init__(self, url: str) -> None:
        self.url = url
        self.stages: list[str] = []

    async def resolve_upstream(self, request: ProxyRequest) -> str:
        self.stages.append("resolve")
        return self.url

    async def before_forward(self, request: ProxyRequest) -> None:
        self.stages.append("before")


@pytest.fixture
def proxy_request() -> ProxyRequest:
    return ProxyRequest(
        session_id="1",
        resource="statements",
        method="PUT",
        query_string="statementId=abc",
        headers=[
            ("Host", "cts:3399"),
            ("Content-Type", "application/json"),
            ("Content-Length", "2"),
            ("Connection", "keep-alive"),
            ("X-Experience-API-Version", "1.0.3"),
            ("Accept", "application/json"),
            ("Accept", "text/plain"),
        ],
        body=b"{}",
        client_host="10.0.0.9",
        scheme="http",
        host="cts:3399",
        port=3399,
    )


class TestForwardHeaders:
    """Test suite for ProxyPipeline.forward_headers()."""

    def test_drops_hop_by_hop_and_adds_forwarded_headers(self, proxy_request: ProxyRequest) -> None:
        # Act
        headers = FixedTargetPipeline("https://lrs").forward_headers(proxy_request)

        # Assert
        assert "host" not in headers
        assert "connection" not in headers
        assert "content-length" not in headers
        assert headers["content-type"] == "application/json"
        assert headers["x-experience-api-version"] == "1.0.3"
        assert headers["accept"] == "application/json, text/plain"
        assert headers["x-forwarded-for"] == "10.0.0.9"
        assert headers["x-forwarded-port"] == "3399"
        assert headers["x-forwarded-proto"] == "http"
        assert headers["x-forwarded-host"] == "cts:3399"

    def test_appends_to_existing_forwarded_for(self, proxy_request: ProxyRequest) -> None:
        proxy_request.headers.append(("X-Forwarded-For", "192.168.1.1"))

        headers = FixedTargetPipeline("https://lrs").forward_headers(proxy_request)

        assert headers["x-forwarded-for"] == "192.168.1.1,10.0.0.9"


class TestRun:
    """Test suite for ProxyPipeline.run()."""

    @pytest.mark.asyncio
    async def test_relays_upstream_response(
        self, proxy_request: ProxyRequest, streamed_body
    ) -> None:
        # Arrange
        pipeline = FixedTargetPipeline("https://lrs/statements?statementId=abc")
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            pipeline.stages.append("send")
            seen.append(request)
            return httpx.Response(
                204,
                headers=[
                    ("X-Experience-API-Version", "1.0.3"),
                    ("Transfer-Encoding", "chunked"),
                    ("Set-Cookie", "a=1"),
                    ("Set-Cookie", "b=2"),
                ],
                stream=streamed_body(),
            )

        # Act
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            proxied = await pipeline.run(proxy_request, client)
            body = b"".join([chunk async for chunk in proxied.body])
            await proxied.close()

        # Assert
        assert pipeline.stages == ["resolve", "before", "send"]
        assert seen[0].method == "PUT"
        assert str(seen[0].url) == "https://lrs/statements?statementId=abc"
        assert seen[0].content == b"{}"
        assert proxied.status_code == 204
        assert body == b""
        names = [name.lower() for name, _ in proxied.headers]
        assert "transfer-encoding" not in names
        assert ("set-cookie", "a=1") in [(n.lower(), v) for n, v in proxied.headers]
        assert ("set-cookie", "b=2") in [(n.lower(), v) for n, v in proxied.headers]

    @pytest.mark.asyncio
    async def test_transport_failure_raises_upstream_error(self, proxy_request: ProxyRequest) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(UpstreamError) as exc_info:
                await FixedTargetPipeline("https://lrs").run(proxy_request, client)

        assert str(exc_info.value) == "Test request failed: connection refused"
