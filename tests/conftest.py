"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory async database, seeded registration data, event hub,
mock-transport Player clients, streamed upstream bodies, event-stream frame helpers
Dependencies: pytest, sqlalchemy, aiosqlite, httpx
System role: Test infrastructure and fixture management
"""

import json

import httpx
import pytest


PLAYER_BASE_URL = "https://player"
GATEWAY_BASE_URL = "https://cts"

ACTOR = {
    "objectType": "Agent",
    "account": {"homePage": "https://cts", "name": "learner-1"},
}


class ChunkedBody(httpx.AsyncByteStream):
    """Response body handed out chunk by chunk, the way a live upstream sends it."""

    def __init__(self, *chunks: bytes) -> None:
        self.chunks = chunks

    async def __aiter__(self):
        for chunk in self.chunks:
            yield chunk


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup (lazy imported to avoid settings issues)
    """
    from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
    from sqlalchemy.pool import StaticPool
    from session_gateway.boundary.db.base import Base
    import session_gateway.boundary.db.models  # noqa: F401  (register tables)

    # Use SQLite in-memory database for tests
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Create session factory
    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    # Create session for test
    async with async_session() as session:
        yield session
        await session.rollback()

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def seeded_db(test_async_db):
    """
    Database holding one tenant, one course (player id "101") and registration 42.

    Returns:
        AsyncSession: Session with committed seed rows
    """
    from session_gateway.boundary.db.models import CourseModel, RegistrationModel, TenantModel

    test_async_db.add(
        TenantModel(id=1, code="user-admin", player_tenant_id=5, player_api_token="tenant-token")
    )
    test_async_db.add(CourseModel(id=7, tenant_id=1, player_id="101", course_metadata={}))
    test_async_db.add(
        RegistrationModel(
            id=42,
            tenant_id=1,
            course_id=7,
            code="reg-code-42",
            registration_metadata={"actor": ACTOR},
        )
    )
    await test_async_db.commit()
    return test_async_db


@pytest.fixture
async def existing_session(seeded_db):
    """A launched session for registration 42 with upstream LRS and fetch URLs."""
    from session_gateway.boundary.db.CRUD import session_crud

    session = await session_crud.create(
        seeded_db,
        tenant_id=1,
        upstream_session_id="9001",
        registration_id=42,
        upstream_launch_url=(
            f"{PLAYER_BASE_URL}/launch?endpoint={PLAYER_BASE_URL}/lrs"
            f"&fetch={PLAYER_BASE_URL}/fetch/abc"
        ),
        upstream_endpoint=f"{PLAYER_BASE_URL}/lrs",
        upstream_fetch=f"{PLAYER_BASE_URL}/fetch/abc",
        session_metadata={},
    )
    await seeded_db.commit()
    return session


@pytest.fixture
def event_hub():
    """Fresh event hub per test."""
    from session_gateway.core.event_hub import EventHub

    hub = EventHub()
    yield hub
    hub.close_all()


@pytest.fixture
def player_settings():
    """Player settings pointing at the mocked Player."""
    from session_gateway.configs.player import PlayerSettings

    return PlayerSettings(base_url=PLAYER_BASE_URL, key=None, secret=None)


@pytest.fixture
async def mock_http_client():
    """
    Factory for httpx clients whose traffic is answered by a handler function.

    Yields:
        Callable: handler -> httpx.AsyncClient backed by httpx.MockTransport
    """
    clients: list[httpx.AsyncClient] = []

    def factory(handler):
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield factory

    for client in clients:
        await client.aclose()


@pytest.fixture
def player_client(mock_http_client, player_settings):
    """Factory for PlayerClient instances answered by a handler function."""
    from session_gateway.boundary.player import PlayerClient

    def factory(handler):
        return PlayerClient(mock_http_client(handler), player_settings)

    return factory


@pytest.fixture
def parse_frame():
    """
    Parse one serialized event-stream frame.

    Returns:
        Callable: frame -> (event name or None, decoded data)
    """
    def parse(frame: str):
        assert frame.endswith("\n\n")
        event_name = None
        data = None
        for line in frame.strip("\n").split("\n"):
            field, _, value = line.partition(": ")
            if field == "event":
                event_name = value
            elif field == "data":
                data = json.loads(value)
        return event_name, data

    return parse


@pytest.fixture
def read_frames():
    """
    Read a number of frames already written to a channel.

    Returns:
        Callable: async (channel, count) -> list of frames
    """
    async def read(channel, count: int) -> list[str]:
        frames = []
        iterator = aiter(channel)
        for _ in range(count):
            frames.append(await anext(iterator))
        return frames

    return read


@pytest.fixture
def streamed_body():
    """
    Build a not-yet-read upstream body for mock transport responses.

    Returns:
        Callable: (*chunks) -> ChunkedBody for ``httpx.Response(stream=...)``
    """
    return ChunkedBody
