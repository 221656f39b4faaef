"""
Database models package.

Exports:
  - TenantModel, CourseModel, RegistrationModel: external collaborator entities
  - SessionModel: Session ORM model

Dependencies: sqlalchemy, session_gateway.boundary.db.base
System role: Database model definitions for domain entities
"""

from session_gateway.boundary.db.models.tenant_model import TenantModel
from session_gateway.boundary.db.models.course_model import CourseModel
from session_gateway.boundary.db.models.registration_model import RegistrationModel
from session_gateway.boundary.db.models.session_model import SessionModel

__all__ = [
    "TenantModel",
    "CourseModel",
    "RegistrationModel",
    "SessionModel",
]
