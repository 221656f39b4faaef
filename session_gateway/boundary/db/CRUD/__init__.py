"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from session_gateway.boundary.db.CRUD import session_crud

    session = await session_crud.get_by_id(db, session_id)
"""

from session_gateway.boundary.db.CRUD.base_crud import BaseCRUD
from session_gateway.boundary.db.CRUD.course_crud import CourseCRUD, course_crud
from session_gateway.boundary.db.CRUD.registration_crud import (
    RegistrationCRUD,
    registration_crud,
)
from session_gateway.boundary.db.CRUD.session_crud import SessionCRUD, session_crud

__all__ = [
    "BaseCRUD",
    "CourseCRUD",
    "course_crud",
    "RegistrationCRUD",
    "registration_crud",
    "SessionCRUD",
    "session_crud",
]
