"""
API error translation.

Maps domain exceptions onto HTTP responses: a decorator for route handlers
and app-level handlers for request validation.

Dependencies: fastapi, session_gateway.core.exceptions
System role: Error boundary for hard-fail routes
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from session_gateway.core.exceptions import (
    GatewayException,
    NotFoundError,
    UpstreamError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def handle_session_errors(func: F) -> F:
    """
    Decorator to translate gateway errors into HTTPExceptions.

    - NotFoundError -> 404
    - ValidationError -> 400
    - UpstreamError and any other failure -> 500 with the message as detail
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except NotFoundError as e:
            logger.warning("Resource not found", extra={"error": str(e)})
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

        except ValidationError as e:
            logger.warning("Invalid request", extra={"error": str(e)})
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

        except UpstreamError as e:
            logger.error(
                "Upstream failure",
                extra={"error": str(e), "upstream_status": e.upstream_status},
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=e.message,
            )

        except GatewayException as e:
            logger.error("Gateway failure", extra={"error": str(e)})
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=e.message,
            )

        except Exception as e:
            logger.exception("Unexpected failure in session operation", extra={"error": str(e)})
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"An internal error occurred: {e}",
            )

    return wrapper  # type: ignore


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed payloads as 400 before any upstream call."""
    logger.warning(
        "Request validation failed",
        extra={"path": request.url.path, "errors": len(exc.errors())},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


def install_exception_handlers(app: FastAPI) -> None:
    """Register app-level exception handlers."""
    app.add_exception_handler(RequestValidationError, request_validation_handler)
