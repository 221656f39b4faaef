"""Service orchestrators."""

from .fetch_relay_service import FetchRelayService
from .launch_service import LaunchService
from .lrs_proxy_service import LrsProxyService
from .session_service import SessionService

__all__ = [
    "FetchRelayService",
    "LaunchService",
    "LrsProxyService",
    "SessionService",
]
