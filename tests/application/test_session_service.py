"""
Test suite for SessionService.

Covers session lookup, event stream opening and the upstream-first
cascading delete against
in-memory SQLite, with the Player answered by httpx.MockTransport.

System role: Verification of Session Accessor
"""

import logging
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from session_gateway.application.services.session_service import SessionService
from session_gateway.boundary.db.CRUD import course_crud, registration_crud, session_crud
from session_gateway.core.exceptions import NotFoundError, PersistenceError, UpstreamError


def delete_handler(status_code: int, calls: list[httpx.Request] | None = None, **kwargs):
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        return httpx.Response(status_code, **kwargs)

    return handler


class TestGetSession:
    """Test suite for SessionService.get_session()."""

    @pytest.mark.asyncio
    async def test_get_session_hides_upstream_fields(
        self, seeded_db, existing_session, player_client, event_hub
    ) -> None:
        # Arrange
        service = SessionService(seeded_db, player_client(delete_handler(204)), event_hub)

        # Act
        result = await service.get_session(existing_session.id)

        # Assert
        assert set(result) == {"id", "tenant_id", "registration_id", "metadata", "created_at", "updated_at"}
        assert result["id"] == existing_session.id
        assert result["registration_id"] == 42

    @pytest.mark.asyncio
    async def test_get_session_is_repeatable(self, seeded_db, existing_session, player_client, event_hub) -> None:
        service = SessionService(seeded_db, player_client(delete_handler(204)), event_hub)

        first = await service.get_session(existing_session.id)
        second = await service.get_session(existing_session.id)

        assert first == second

    @pytest.mark.asyncio
    async def test_get_session_not_found(self, seeded_db, player_client, event_hub) -> None:
        service = SessionService(seeded_db, player_client(delete_handler(204)), event_hub)

        with pytest.raises(NotFoundError) as exc_info:
            await service.get_session(999)

        assert str(exc_info.value) == "session: 999"


class TestDeleteByCourse:
    """Test suite for SessionService.delete_by_course()."""

    @pytest.mark.asyncio
    async def test_player_204_removes_course_and_dependents(
        self, seeded_db, existing_session, player_client, event_hub
    ) -> None:
        # Arrange
        calls: list[httpx.Request] = []
        service = SessionService(seeded_db, player_client(delete_handler(204, calls)), event_hub)

        # Act
        removed = await service.delete_by_course(7)

        # Assert
        assert removed == [existing_session.id]
        assert calls[0].method == "DELETE"
        assert str(calls[0].url) == "https://player/api/v1/course/101"
        assert calls[0].headers["authorization"] == "Bearer tenant-token"
        assert await course_crud.get_by_id(seeded_db, 7) is None
        assert await registration_crud.get_by_id(seeded_db, 42) is None
        assert await session_crud.get_by_id(seeded_db, existing_session.id) is None

    @pytest.mark.asyncio
    async def test_player_error_keeps_local_rows(
        self, seeded_db, existing_session, player_client, event_hub
    ) -> None:
        # Arrange
        handler = delete_handler(500, json={"message": "Player storage failure"})
        service = SessionService(seeded_db, player_client(handler), event_hub)

        # Act
        with pytest.raises(UpstreamError) as exc_info:
            await service.delete_by_course(7)

        # Assert
        assert exc_info.value.upstream_status == 500
        assert "Player storage failure" in str(exc_info.value)
        assert await course_crud.get_by_id(seeded_db, 7) is not None
        assert await session_crud.get_by_id(seeded_db, existing_session.id) is not None

    @pytest.mark.asyncio
    async def test_non_204_success_status_is_still_a_failure(
        self, seeded_db, existing_session, player_client, event_hub
    ) -> None:
        service = SessionService(seeded_db, player_client(delete_handler(200, json={})), event_hub)

        with pytest.raises(UpstreamError):
            await service.delete_by_course(7)

        assert await course_crud.get_by_id(seeded_db, 7) is not None

    @pytest.mark.asyncio
    async def test_player_unreachable_keeps_local_rows(
        self, seeded_db, existing_session, player_client, event_hub
    ) -> None:
        # Arrange
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        service = SessionService(seeded_db, player_client(handler), event_hub)

        # Act & Assert
        with pytest.raises(UpstreamError):
            await service.delete_by_course(7)
        assert await session_crud.get_by_id(seeded_db, existing_session.id) is not None

    @pytest.mark.asyncio
    async def test_unknown_course_raises_not_found_without_upstream_call(
        self, seeded_db, player_client, event_hub
    ) -> None:
        calls: list[httpx.Request] = []
        service = SessionService(seeded_db, player_client(delete_handler(204, calls)), event_hub)

        with pytest.raises(NotFoundError):
            await service.delete_by_course(999)

        assert calls == []

    @pytest.mark.asyncio
    async def test_local_failure_after_upstream_success_is_logged(
        self, seeded_db, existing_session, player_client, event_hub, caplog
    ) -> None:
        # Arrange
        service = SessionService(seeded_db, player_client(delete_handler(204)), event_hub)
        failing_delete = AsyncMock(side_effect=RuntimeError("disk full"))

        # Act
        with patch.object(course_crud, "delete_with_dependents", failing_delete):
            with caplog.at_level(logging.ERROR):
                with pytest.raises(PersistenceError):
                    await service.delete_by_course(7)

        # Assert
        records = [r for r in caplog.records if "inconsistent" in r.getMessage()]
        assert len(records) == 1
        assert records[0].course_player_id == "101"
        assert records[0].course_id == 7


    @pytest.mark.asyncio
    async def test_delete_closes_event_channels_of_removed_sessions(
        self, seeded_db, existing_session, player_client, event_hub
    ) -> None:
        # Arrange
        channel = event_hub.subscribe(existing_session.id)
        service = SessionService(seeded_db, player_client(delete_handler(204)), event_hub)

        # Act
        removed = await service.delete_by_course(7)

        # Assert
        assert removed == [existing_session.id]
        assert channel.closed
        assert not event_hub.has_subscriber(existing_session.id)
        with pytest.raises(NotFoundError):
            await service.get_session(existing_session.id)


class TestOpenEventStream:
    """Test suite for SessionService.open_event_stream()."""

    @pytest.mark.asyncio
    async def test_releases_database_before_streaming(
        self, seeded_db, existing_session, player_client, event_hub, parse_frame
    ) -> None:
        # Arrange
        service = SessionService(seeded_db, player_client(delete_handler(204)), event_hub)

        # Act
        stream = await service.open_event_stream(existing_session.id)

        # Assert
        assert not seeded_db.in_transaction()
        try:
            first = await anext(stream)
            assert parse_frame(first) == ("control", {"kind": "initialize"})
            assert event_hub.has_subscriber(existing_session.id)
        finally:
            await stream.aclose()
        assert not event_hub.has_subscriber(existing_session.id)

    @pytest.mark.asyncio
    async def test_unknown_session_raises_without_subscribing(
        self, seeded_db, player_client, event_hub
    ) -> None:
        service = SessionService(seeded_db, player_client(delete_handler(204)), event_hub)

        with pytest.raises(NotFoundError):
            await service.open_event_stream(999)

        assert not event_hub.has_subscriber(999)
