"""
Error Handling Middleware

Provides consistent error responses across the API.

Features:
- Standardized error response format
- Correlation IDs for log tracking
- Sanitized responses (hides internal details in production)
- Custom exception classes for the tracker's failure modes
- 400 responses for request validation failures

Usage:
    from tutor.middleware.error_handling import setup_error_handling, ServiceError

    setup_error_handling(app, debug=settings.DEBUG)

    raise NoInteractionsFoundError("No interactions found to calculate progress")

Exception handling hierarchy:
    - HTTPException: Re-raised for FastAPI's built-in handler
    - RequestValidationError: 400 with {success, error, details}
    - ServiceError: Custom exceptions → structured JSON response
    - Exception: Catch-all for unexpected errors → sanitized 500
"""

import logging
import traceback
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


# =============================================================================
# Custom Exceptions
# =============================================================================


class ServiceError(Exception):
    """
    Base exception for service errors.

    Provides consistent error handling with:
    - HTTP status code
    - Error code for categorization
    - Optional details for debugging

    Example:
        raise ServiceError("Database connection failed", status_code=503)
    """

    status_code: int = 500
    error_code: str = "service_error"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code:
            self.status_code = status_code
        if error_code:
            self.error_code = error_code
        self.details = details


class LLMError(ServiceError):
    """
    LLM provider error.

    Raised by the AI judge and feedback generator when the provider call
    fails or returns output that does not match the expected schema.
    """

    status_code = 502
    error_code = "llm_error"


class NotFoundError(ServiceError):
    """Resource not found error."""

    status_code = 404
    error_code = "not_found"


class NoInteractionsFoundError(ServiceError):
    """
    Topic progress requested for a topic with no recorded attempts.
    """

    status_code = 409
    error_code = "no_interactions_found"


class AttemptConflictError(ServiceError):
    """
    Another submission claimed the same attempt number first.

    Raised by AttemptStore when the unique attempt constraint fires and
    handled by the orchestrator, which turns it into a rejection.
    """

    status_code = 409
    error_code = "attempt_conflict"


# =============================================================================
# Error Handling Middleware
# =============================================================================


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    - Catches unhandled exceptions
    - Logs with correlation ID
    - Returns consistent error format
    - Hides internal details in production
    """

    def __init__(self, app, debug: bool = False):
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next):
        """Process request and handle any errors."""
        error_id = str(uuid4())[:8]

        try:
            return await call_next(request)

        except HTTPException:
            # Let FastAPI handle HTTP exceptions
            raise

        except ServiceError as e:
            logger.error(
                f"[{error_id}] {e.error_code}: {e.message}",
                extra={
                    "error_id": error_id,
                    "error_code": e.error_code,
                    "path": request.url.path,
                    "method": request.method,
                },
            )
            return service_error_response(e, error_id, self.debug)

        except Exception as e:
            logger.error(
                f"[{error_id}] Unhandled error: {type(e).__name__}: {e}",
                extra={
                    "error_id": error_id,
                    "path": request.url.path,
                    "method": request.method,
                    "traceback": traceback.format_exc(),
                },
            )

            content = {
                "success": False,
                "error": "internal_server_error",
                "message": "An unexpected error occurred",
                "error_id": error_id,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }

            if self.debug:
                content["details"] = {
                    "exception": type(e).__name__,
                    "message": str(e),
                    "traceback": traceback.format_exc(),
                }

            return JSONResponse(status_code=500, content=content)


# =============================================================================
# Exception Handlers
# =============================================================================


def service_error_response(
    error: ServiceError, error_id: Optional[str] = None, debug: bool = False
) -> JSONResponse:
    """Render a ServiceError in the standard error format."""
    return JSONResponse(
        status_code=error.status_code,
        content={
            "success": False,
            "error": error.error_code,
            "message": error.message,
            "error_id": error_id or str(uuid4())[:8],
            "details": error.details if debug else None,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 400 for malformed request bodies and query parameters."""
    errors = jsonable_encoder(exc.errors(), custom_encoder={Exception: str})
    logger.warning(
        f"Validation failed on {request.method} {request.url.path}: {len(errors)} error(s)"
    )
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Invalid request data",
            "details": errors,
        },
    )


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Handle ServiceErrors raised from dependencies before the route runs."""
    return service_error_response(exc, debug=getattr(request.app, "debug", False))


# =============================================================================
# Setup Function
# =============================================================================


def setup_error_handling(app: FastAPI, debug: bool = False) -> None:
    """
    Configure error handling on the FastAPI app.

    Args:
        app: FastAPI application instance
        debug: Whether to include stack traces in responses
    """
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_middleware(ErrorHandlingMiddleware, debug=debug)
    logger.info(f"Error handling middleware enabled (debug={debug})")
