"""
Course CRUD operations.

Dependencies: sqlalchemy, session_gateway.boundary.db.models
System role: Course persistence operations, cascading delete
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from session_gateway.boundary.db.CRUD.base_crud import BaseCRUD
from session_gateway.boundary.db.models.course_model import CourseModel
from session_gateway.boundary.db.models.registration_model import RegistrationModel


class CourseCRUD(BaseCRUD[CourseModel]):
    """
    CRUD operations for CourseModel.

    Extends BaseCRUD with a cascading delete that removes registrations
    and sessions through the ORM so it behaves the same on every backend.
    """

    def __init__(self) -> None:
        """Initialize CourseCRUD with CourseModel."""
        super().__init__(CourseModel)

    async def get_with_tenant(
        self,
        session: AsyncSession,
        id: int,
    ) -> CourseModel | None:
        """
        Retrieve course with its tenant eagerly loaded.

        Args:
            session: Async database session
            id: Course id

        Returns:
            CourseModel with tenant loaded, None if not found
        """
        stmt = (
            select(CourseModel)
            .where(CourseModel.id == id)
            .options(selectinload(CourseModel.tenant))
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_with_dependents(self, session: AsyncSession, id: int) -> list[int] | None:
        """
        Delete a course together with its registrations and sessions.

        Args:
            session: Async database session
            id: Course id

        Returns:
            list[int]: Ids of the sessions removed, None if the course was not found
        """
        stmt = (
            select(CourseModel)
            .where(CourseModel.id == id)
            .options(
                selectinload(CourseModel.registrations).selectinload(
                    RegistrationModel.sessions
                )
            )
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        course = result.scalar_one_or_none()
        if course is None:
            return None

        session_ids = [
            s.id for registration in course.registrations for s in registration.sessions
        ]
        await session.delete(course)
        await session.flush()
        return session_ids


course_crud = CourseCRUD()
