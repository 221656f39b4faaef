"""
Tenant ORM model.

Tenants are provisioned by the bootstrap flow and map a local account to a
tenant inside the Player service. Read-only from the gateway's point of view.

Dependencies: sqlalchemy, session_gateway.boundary.db.base
System role: Upstream tenant credentials for Player calls
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from session_gateway.boundary.db.base import Base, IdMixin, TimestampMixin


class TenantModel(Base, IdMixin, TimestampMixin):
    """
    Tenant ORM model.

    Attributes:
        id: Integer primary key
        code: Unique tenant code
        player_tenant_id: Tenant id inside the Player service
        player_api_token: Bearer token for Player API calls (None falls back to basic auth)
    """

    __tablename__ = "tenants"

    code: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    player_tenant_id: Mapped[int | None] = mapped_column(nullable=True, default=None)
    player_api_token: Mapped[str | None] = mapped_column(String(1024), nullable=True, default=None)

    courses = relationship("CourseModel", back_populates="tenant")
