"""
Session domain models and schemas.

Request/response schemas for session operations. JSON keys are camelCase
on the wire; Python attributes stay snake_case.

Dependencies: pydantic
System role: Session API contracts
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serializing field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateSessionRequest(CamelModel):
    """Request schema for launching a new session."""

    test_id: int = Field(..., ge=1, description="Registration id to launch for")
    au_index: int = Field(..., ge=0, description="Index of the AU within the course")


class SessionResponse(CamelModel):
    """
    Client-facing session view.

    Upstream ids and URLs are never part of this schema. ``launch_url`` is
    only populated in the creation response.
    """

    id: int
    tenant_id: int
    registration_id: int
    metadata: dict = Field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    launch_url: str | None = None
