# 📄 File: plantid/api/middleware/error_handling.py
# 🧭 Purpose (Layman Explanation):
# This file catches any errors that happen in our app and turns them into friendly, consistent error messages,
# so the app always gets the same error shape whether a photo was bad, a limit was reached or a service was down.
# 🧪 Purpose (Technical Summary):
# Global error handling: request correlation middleware (X-Request-ID / X-Response-Time) that converts
# unexpected exceptions into a 500 envelope, plus FastAPI exception handlers rendering PlantIdException,
# request validation errors and HTTP exceptions as {"error": {code, message, details, timestamp, request_id}}.
# 🔗 Dependencies:
# FastAPI, starlette, plantid.shared.core.exceptions, plantid.shared.utils.logging, uuid
# 🔄 Connected Modules / Calls From:
# plantid.main (middleware and exception handler registration)

import time
import traceback
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from plantid.shared.config.settings import get_settings
from plantid.shared.core.exceptions import PlantIdException
from plantid.shared.core.rate_limiter import rate_limit_exceeded_handler
from plantid.shared.utils.logging import get_logger, log_context

from . import COMMON_HEADERS

logger = get_logger(__name__)

REQUEST_ID_HEADER = COMMON_HEADERS["REQUEST_ID"]
RESPONSE_TIME_HEADER = COMMON_HEADERS["RESPONSE_TIME"]


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Outermost middleware: request correlation and last-resort error handling.

    Domain exceptions are rendered by the exception handlers below; anything
    that escapes them ends up here as a 500 envelope.
    """

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        self.settings = get_settings()

    async def dispatch(self, request: Request, call_next) -> Response:
        # Reuse the caller's correlation id when it sent one
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = time.time()

        with log_context(request_id=request_id):
            try:
                response = await call_next(request)
            except Exception as exc:
                response = self._handle_exception(request, exc, request_id)

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers[RESPONSE_TIME_HEADER] = f"{time.time() - start_time:.3f}s"
        return response

    def _handle_exception(self, request: Request, exc: Exception, request_id: str) -> JSONResponse:
        logger.error(
            f"❌ Unhandled error in {request.method} {request.url.path}: {type(exc).__name__}: {exc}",
            exc_info=True
        )

        details: Dict[str, Any] = {}
        if self.settings.DEBUG and not self.settings.is_production:
            details["debug"] = {
                "exception_type": type(exc).__name__,
                "exception_message": str(exc),
                "traceback": traceback.format_exc().split('\n'),
            }

        return create_error_response(
            error_code="INTERNAL_SERVER_ERROR",
            message="An internal server error occurred",
            status_code=500,
            details=details,
            request_id=request_id,
        )


# Utility functions for error handling
def create_error_response(
    error_code: str,
    message: str,
    status_code: int = 500,
    details: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    """
    Create a standardized error response

    Args:
        error_code: Error code identifier
        message: Human-readable error message
        status_code: HTTP status code
        details: Additional error details
        request_id: Request correlation ID
        headers: Extra response headers

    Returns:
        JSON error response
    """
    response = JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": error_code,
                "message": message,
                "details": details or {},
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "request_id": request_id,
            }
        },
        headers=headers,
    )
    response.headers["X-Error-Code"] = error_code
    return response


def format_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Flatten pydantic errors; inputs are dropped since they may hold whole images."""
    return [
        {
            "field": ".".join(str(loc) for loc in error.get("loc", [])),
            "message": error.get("msg", "Validation error"),
            "type": error.get("type", "validation_error"),
        }
        for error in errors
    ]


# Exception handlers
async def plant_id_exception_handler(request: Request, exc: PlantIdException) -> JSONResponse:
    """Render domain exceptions with their own status code and error code."""
    request_id = getattr(request.state, "request_id", None)

    if exc.status_code >= 500:
        logger.error(f"❌ {exc.error_code} in {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"Client error {exc.status_code} {exc.error_code} in {request.method} {request.url.path}")

    headers = None
    retry_after = (exc.details or {}).get("retry_after")
    if retry_after:
        headers = {"Retry-After": str(retry_after)}

    return create_error_response(
        error_code=exc.error_code,
        message=exc.message,
        status_code=exc.status_code,
        details=exc.details,
        request_id=request_id,
        headers=headers,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request body / path / query validation failures (422)."""
    return create_error_response(
        error_code="VALIDATION_ERROR",
        message="Request validation failed",
        status_code=422,
        details={"validation_errors": format_validation_errors(exc.errors())},
        request_id=getattr(request.state, "request_id", None),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Framework HTTP errors (unknown routes, wrong methods) in the same envelope."""
    return create_error_response(
        error_code=f"HTTP_{exc.status_code}",
        message=str(exc.detail),
        status_code=exc.status_code,
        request_id=getattr(request.state, "request_id", None),
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach every exception handler to the application."""
    app.add_exception_handler(PlantIdException, plant_id_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
