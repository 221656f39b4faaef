"""
Observability module.

Provides structured logging, correlation ID tracking and request logging
middleware.
"""

from session_gateway.observability.correlation import get_correlation_id, set_correlation_id
from session_gateway.observability.logger import configure_logging

__all__ = [
    "configure_logging",
    "get_correlation_id",
    "set_correlation_id",
]
