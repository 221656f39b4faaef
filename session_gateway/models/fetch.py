"""
Fetch relay schemas.

Dependencies: pydantic
System role: Soft-failure contract for fetch token refresh
"""

from pydantic import Field

from session_gateway.models.session import CamelModel

GENERAL_APPLICATION_ERROR = "3"


class FetchErrorEnvelope(CamelModel):
    """Fixed-shape error body returned with HTTP 400 when a fetch relay fails."""

    error_code: str = Field(default=GENERAL_APPLICATION_ERROR)
    error_text: str

    @classmethod
    def from_exception(cls, exc: BaseException) -> "FetchErrorEnvelope":
        return cls(error_text=f"General Application Error: {exc}")
