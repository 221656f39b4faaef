"""
Registration CRUD operations.

Dependencies: sqlalchemy, session_gateway.boundary.db.models
System role: Registration lookups for session launches
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from session_gateway.boundary.db.CRUD.base_crud import BaseCRUD
from session_gateway.boundary.db.models.registration_model import RegistrationModel


class RegistrationCRUD(BaseCRUD[RegistrationModel]):
    """CRUD operations for RegistrationModel."""

    def __init__(self) -> None:
        """Initialize RegistrationCRUD with RegistrationModel."""
        super().__init__(RegistrationModel)

    async def get_with_course(
        self,
        session: AsyncSession,
        id: int,
    ) -> RegistrationModel | None:
        """
        Retrieve a registration joined with its course and tenant.

        Args:
            session: Async database session
            id: Registration id

        Returns:
            RegistrationModel with course and tenant loaded, None if not found
        """
        stmt = (
            select(RegistrationModel)
            .where(RegistrationModel.id == id)
            .options(
                selectinload(RegistrationModel.course),
                selectinload(RegistrationModel.tenant),
            )
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


registration_crud = RegistrationCRUD()
