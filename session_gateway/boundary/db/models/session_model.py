"""
Session ORM model.

Binds a registration to an upstream launch of one AU. Stores the upstream
endpoints the gateway proxies to; those columns never leave the service.

Dependencies: sqlalchemy, session_gateway.boundary.db.base
System role: Session persistence for proxy routing
"""

from sqlalchemy import JSON, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from session_gateway.boundary.db.base import Base, IdMixin, TimestampMixin


class SessionModel(Base, IdMixin, TimestampMixin):
    """
    Session ORM model.

    Upstream columns are written once at creation and never updated.

    Attributes:
        id: Integer primary key (the session id handed to clients)
        tenant_id: Owning tenant
        upstream_session_id: Session id assigned by the Player
        registration_id: Owning registration
        upstream_launch_url: Launch URL as issued by the Player
        upstream_endpoint: Player LRS base URL
        upstream_fetch: Player fetch URL
        session_metadata: JSON column ``metadata``, empty on creation
    """

    __tablename__ = "sessions"

    tenant_id: Mapped[int] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
    )
    upstream_session_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    registration_id: Mapped[int] = mapped_column(
        ForeignKey("registrations.id", ondelete="CASCADE"),
        nullable=False,
    )
    upstream_launch_url: Mapped[str] = mapped_column(Text, nullable=False)
    upstream_endpoint: Mapped[str | None] = mapped_column(Text, nullable=True)
    upstream_fetch: Mapped[str | None] = mapped_column(Text, nullable=True)
    session_metadata: Mapped[dict] = mapped_column(
        "metadata",
        JSON,
        nullable=False,
        default=dict,
        doc="Free-form session metadata",
    )

    registration = relationship("RegistrationModel", back_populates="sessions")
