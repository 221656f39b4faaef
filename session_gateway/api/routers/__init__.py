"""API routers."""

from .health import router as health_router
from .sessions import lrs_proxy_router, sessions_router

__all__ = [
    "health_router",
    "lrs_proxy_router",
    "sessions_router",
]
