"""
Session service orchestrator.

Read operations on session records, the event stream entry point, and the
course delete that removes sessions. Deletion is upstream-first: the Player
must confirm a course delete before any local row is removed.

Dependencies: session_gateway.boundary.db.CRUD, session_gateway.boundary.player
System role: Session Accessor use cases
"""

import logging
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession

from session_gateway.boundary.db.CRUD.course_crud import course_crud
from session_gateway.boundary.db.CRUD.session_crud import session_crud
from session_gateway.boundary.db.models.session_model import SessionModel
from session_gateway.boundary.player.client import PlayerClient
from session_gateway.core.event_hub import EventHub
from session_gateway.core.exceptions import NotFoundError, PersistenceError

logger = logging.getLogger(__name__)


def to_session_view(session: SessionModel) -> dict:
    """
    Serialize a session row for clients.

    Upstream ids and URLs never appear in the view.
    """
    return {
        "id": session.id,
        "tenant_id": session.tenant_id,
        "registration_id": session.registration_id,
        "metadata": session.session_metadata,
        "created_at": session.created_at,
        "updated_at": session.updated_at,
    }


class SessionService:
    """Session service orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        player: PlayerClient,
        event_hub: EventHub,
    ) -> None:
        """
        Initialize session service.

        Args:
            db: Async SQLAlchemy session
            player: Player API client
            event_hub: Live event registry, used to close channels of removed sessions
        """
        self.db = db
        self.player = player
        self.event_hub = event_hub

    async def get_session(self, session_id: int) -> dict:
        """
        Get session by ID.

        Args:
            session_id: Session id

        Returns:
            dict: Session view without upstream fields

        Raises:
            NotFoundError: If session not found
        """
        session = await session_crud.get_by_id(self.db, session_id)
        if session is None:
            raise NotFoundError("session", session_id)

        return to_session_view(session)

    async def open_event_stream(self, session_id: int) -> AsyncIterator[str]:
        """
        Check the session exists and hand back its live event stream.

        The database session is closed before returning; the stream itself
        holds no connection for however long the observer stays attached.

        Raises:
            NotFoundError: If session not found
        """
        await self.get_session(session_id)
        await self.db.close()
        return self.event_hub.stream(session_id)

    async def delete_by_course(self, course_id: int) -> list[int]:
        """
        Delete a course upstream, then locally with its registrations and sessions.

        The local row is only removed after the Player answers 204. A local
        failure after a successful upstream delete leaves the two stores out of
        step; it is logged as an inconsistency and re-raised. Event streams of
        the removed sessions are closed.

        Args:
            course_id: Local course id

        Returns:
            list[int]: Ids of the sessions removed locally

        Raises:
            NotFoundError: If course not found
            UpstreamError: Player delete failed or returned a status other than 204
            PersistenceError: Local delete failed after upstream success
        """
        course = await course_crud.get_with_tenant(self.db, course_id)
        if course is None:
            raise NotFoundError("course", course_id)

        # rollback expires loaded rows, keep plain values for the error log
        course_player_id = course.player_id
        api_token = course.tenant.player_api_token if course.tenant else None
        await self.player.delete_course(course_player_id, api_token=api_token)

        try:
            removed = await course_crud.delete_with_dependents(self.db, course_id) or []
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(
                "Course deleted in player but local delete failed; stores are inconsistent",
                extra={
                    "course_id": course_id,
                    "course_player_id": course_player_id,
                    "error": str(e),
                },
            )
            raise PersistenceError(
                f"Failed to delete course {course_id}: {e}",
                operation="delete",
            ) from e

        for removed_id in removed:
            self.event_hub.unsubscribe(removed_id)

        logger.info(
            "Course deleted",
            extra={"course_id": course_id, "removed_sessions": len(removed)},
        )
        return removed
