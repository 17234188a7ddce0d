"""Error Handlers: global exception handlers for the mirror API.

Invariants:
    - ReflectMirrorError → its own to_response() envelope and http_status
    - Unmatched method/path (Starlette 404/405) → ROUTE_NOT_FOUND envelope, status 404
    - Exception (catch-all) → never leaks internal details
    - Client errors log at WARNING; internal errors log at ERROR with category and debug info

Design Decisions:
    - Three-layer handler: domain (ReflectMirrorError), routing (HTTPException), catch-all (Exception)
    - Kept out of main.py so app construction stays a short list of registrations
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from reflect_mirror.core.errors import (
    ErrorCategory, ErrorSeverity, ReflectMirrorError, RouteNotFoundError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_mirror_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_mirror_error_handler(app: FastAPI) -> None:
    """Register domain/validation/contract error handler."""

    @app.exception_handler(ReflectMirrorError)
    async def mirror_error_handler(request: Request, exc: ReflectMirrorError):
        """Handle all mirror errors raised by the dispatcher or handlers."""
        extra = {
            "error_code": exc.code,
            "status_code": exc.http_status,
            "route": exc.context.route,
            "method": request.method,
            "integration_id": exc.context.integration_id,
        }
        if exc.http_status >= 500:
            logger.error(
                f"{exc.category.value} error on {request.url.path}: {exc.message} "
                f"{exc.context.debug_info or ''}",
                extra=extra,
                exc_info=exc,
            )
        else:
            logger.warning(f"{exc.code}: {exc.message}", extra=extra)
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_http_error_handler(app: FastAPI) -> None:
    """Register Starlette routing error handler."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        """No route table entry for this method and path."""
        if exc.status_code in (
            status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED,
        ):
            error = RouteNotFoundError(request.method, request.url.path)
            logger.warning(
                error.message,
                extra={"error_code": error.code, "status_code": 404,
                       "method": request.method},
            )
            return JSONResponse(status_code=404, content=error.to_response())
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(
                "HTTP_ERROR", str(exc.detail), ErrorCategory.VALIDATION,
                ErrorSeverity.ERROR,
            ),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            extra={"error_code": "INTERNAL_ERROR", "status_code": 500,
                   "method": request.method},
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(
                "INTERNAL_ERROR", "An unexpected error occurred",
                ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
            ),
        )


def _error_body(
    code: str, message: str, category: ErrorCategory, severity: ErrorSeverity,
) -> dict:
    return {
        "success": False,
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    }
