"""
Registration ORM model.

Joins a learner (actor) to a course. The ``code`` is the registration
reference handed to the Player when requesting launch URLs.

Dependencies: sqlalchemy, session_gateway.boundary.db.base
System role: Registration persistence, source of actor identity
"""

from sqlalchemy import JSON, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from session_gateway.boundary.db.base import Base, IdMixin, TimestampMixin


class RegistrationModel(Base, IdMixin, TimestampMixin):
    """
    Registration ORM model.

    Attributes:
        id: Integer primary key
        tenant_id: Owning tenant
        course_id: Parent course
        code: Upstream registration reference
        registration_metadata: JSON column ``metadata``; ``actor`` holds the xAPI actor

    Relationships:
        course: Many-to-one with CourseModel
        sessions: One-to-many with SessionModel (cascade delete)
    """

    __tablename__ = "registrations"

    tenant_id: Mapped[int] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
    )
    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
    )
    code: Mapped[str] = mapped_column(String(255), nullable=False)
    registration_metadata: Mapped[dict] = mapped_column(
        "metadata",
        JSON,
        nullable=False,
        default=dict,
    )

    tenant = relationship("TenantModel")
    course = relationship("CourseModel", back_populates="registrations")
    sessions = relationship(
        "SessionModel",
        back_populates="registration",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
