"""
Course ORM model.

Represents a course imported into the Player. Deleting a course removes its
registrations and their sessions.

Dependencies: sqlalchemy, session_gateway.boundary.db.base
System role: Course persistence for upstream course references
"""

from sqlalchemy import JSON, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from session_gateway.boundary.db.base import Base, IdMixin, TimestampMixin


class CourseModel(Base, IdMixin, TimestampMixin):
    """
    Course ORM model.

    Attributes:
        id: Integer primary key
        tenant_id: Owning tenant
        player_id: Course id inside the Player service
        course_metadata: JSON column ``metadata`` (structure, title, etc.)

    Relationships:
        registrations: One-to-many with RegistrationModel (cascade delete)
    """

    __tablename__ = "courses"

    tenant_id: Mapped[int] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
    )
    player_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        default=None,
        doc="Upstream course reference",
    )
    course_metadata: Mapped[dict] = mapped_column(
        "metadata",
        JSON,
        nullable=False,
        default=dict,
    )

    tenant = relationship("TenantModel", back_populates="courses")
    registrations = relationship(
        "RegistrationModel",
        back_populates="course",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
