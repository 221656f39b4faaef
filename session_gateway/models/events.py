"""
Session event payloads.

Payloads published to the event hub while traffic passes through the proxy.

Dependencies: pydantic
System role: Event stream contracts
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SessionEventKind(str, Enum):
    """Values of the ``kind`` field of published events."""

    INITIALIZE = "initialize"
    END = "end"
    LRS = "lrs"
    SPEC = "spec"


class SessionEvent(BaseModel):
    """Base event payload."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    kind: SessionEventKind

    def to_payload(self) -> dict[str, Any]:
        """Convert to the JSON-serializable dict written to the stream."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class LrsTrafficEvent(SessionEvent):
    """An LRS request passed through the proxy."""

    kind: SessionEventKind = SessionEventKind.LRS
    method: str
    resource: str


class FetchEvent(SessionEvent):
    """Outcome of a fetch relay call."""

    kind: SessionEventKind = SessionEventKind.SPEC
    resource: str = "fetch"
    player_response_status_code: int | None = Field(
        default=None, alias="playerResponseStatusCode"
    )
    error: str | None = None
