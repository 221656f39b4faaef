"""
FastAPI application entry point.

Initializes FastAPI app, registers routers, adds middleware, and configures lifespan.

Dependencies: fastapi, uvicorn, session_gateway.api, session_gateway.observability, session_gateway.configs
System role: Application initialization and configuration
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from session_gateway.api import api_router
from session_gateway.api.errors import install_exception_handlers
from session_gateway.api.passthrough import PassthroughCORSMiddleware, is_passthrough_path
from session_gateway.boundary.db import dispose_engine
from session_gateway.boundary.player import create_http_client
from session_gateway.configs import get_settings
from session_gateway.core.event_hub import EventHub
from session_gateway.observability.logger import configure_logging
from session_gateway.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Creates the process-wide event hub and upstream HTTP client on startup
    and releases them, along with pooled database connections, on shutdown.
    """
    settings = get_settings()

    # Startup
    configure_logging(settings.log_level)
    logger.info("Application startup: logging configured")

    app.state.event_hub = EventHub()
    app.state.http_client = create_http_client(settings.player)
    logger.info(
        "Application startup complete",
        extra={"player_base_url": settings.player.base_url},
    )

    yield

    # Shutdown
    app.state.event_hub.close_all()
    await app.state.http_client.aclose()
    await dispose_engine()
    logger.info("Application shutdown")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()

    app = FastAPI(
        title="Session Gateway",
        description="Launch broker and LRS/fetch proxy for learning sessions",
        version="0.1.0",
        lifespan=lifespan,
    )

    install_exception_handlers(app)

    # Add observability middleware (added first = last to execute)
    app.add_middleware(CorrelationMiddleware, skip_header=is_passthrough_path)
    app.add_middleware(RequestLoggingMiddleware)

    app.add_middleware(
        PassthroughCORSMiddleware,
        allow_origins=settings.cors.allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix=settings.api_prefix)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "session_gateway.main:app",
        host="0.0.0.0",
        port=3399,
    )
