"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, IdMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - TenantModel, CourseModel, RegistrationModel, SessionModel: Domain entities
  - session_crud, registration_crud, course_crud: CRUD operation singletons

Dependencies: sqlalchemy, session_gateway.configs
System role: Session Store adapter
"""

from session_gateway.boundary.db.base import Base, IdMixin, TimestampMixin
from session_gateway.boundary.db.connection import (
    dispose_engine,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from session_gateway.boundary.db.models import (
    CourseModel,
    RegistrationModel,
    SessionModel,
    TenantModel,
)
from session_gateway.boundary.db.CRUD import (
    BaseCRUD,
    CourseCRUD,
    RegistrationCRUD,
    SessionCRUD,
    course_crud,
    registration_crud,
    session_crud,
)

__all__ = [
    # Base classes
    "Base",
    "IdMixin",
    "TimestampMixin",
    # Connection
    "dispose_engine",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "TenantModel",
    "CourseModel",
    "RegistrationModel",
    "SessionModel",
    # CRUD classes
    "BaseCRUD",
    "CourseCRUD",
    "RegistrationCRUD",
    "SessionCRUD",
    # CRUD singletons
    "course_crud",
    "registration_crud",
    "session_crud",
]
