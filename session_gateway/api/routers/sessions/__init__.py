"""
Sessions router package.

Exports the session management router and the LRS proxy router.
"""

from .lrs_proxy_router import router as lrs_proxy_router
from .sessions_router import router as sessions_router

__all__ = ["lrs_proxy_router", "sessions_router"]
