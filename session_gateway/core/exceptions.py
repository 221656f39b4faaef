"""
Exception hierarchy for the session gateway.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class GatewayException(Exception):
    """Base exception for all session gateway errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(GatewayException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class NotFoundError(GatewayException):
    """Raised when a session, registration or course id does not resolve."""

    def __init__(
        self,
        resource: str,
        resource_id: Any,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize not found error.

        Args:
            resource: Kind of resource that was looked up (session, registration, course)
            resource_id: Identifier that failed to resolve
            details: Additional context
        """
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource}: {resource_id}", details)

    def __str__(self) -> str:
        return self.message


class UpstreamError(GatewayException):
    """Raised when a call to the Player service fails or returns an unexpected status."""

    def __init__(
        self,
        message: str,
        upstream_status: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize upstream error.

        Args:
            message: Error message, including upstream detail when available
            upstream_status: Status code returned by the Player, None on transport failure
            details: Additional context
        """
        details = details or {}
        if upstream_status is not None:
            details["upstream_status"] = upstream_status
        self.upstream_status = upstream_status
        super().__init__(message, details)

    def __str__(self) -> str:
        return self.message


class PersistenceError(GatewayException):
    """Raised when the session store rejects a write."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize persistence error.

        Args:
            message: Error message
            operation: Store operation that failed (insert, delete)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)
