"""
Session CRUD operations.

Dependencies: sqlalchemy, session_gateway.boundary.db.models
System role: Session persistence operations
"""

from session_gateway.boundary.db.CRUD.base_crud import BaseCRUD
from session_gateway.boundary.db.models.session_model import SessionModel


class SessionCRUD(BaseCRUD[SessionModel]):
    """CRUD operations for SessionModel."""

    def __init__(self) -> None:
        """Initialize SessionCRUD with SessionModel."""
        super().__init__(SessionModel)


session_crud = SessionCRUD()
