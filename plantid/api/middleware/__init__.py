# 📄 File: plantid/api/middleware/__init__.py
# 🧭 Purpose (Layman Explanation):
# This file organizes the middleware components that wrap every request, giving each one an id,
# timing it, logging it, and turning unexpected errors into tidy responses.
# 🧪 Purpose (Technical Summary):
# Package initialization for API middleware: shared configuration constants, path exclusion helpers
# and exports of the error handling and request logging middleware.
# 🔗 Dependencies:
# starlette middleware, plantid.shared.core
# 🔄 Connected Modules / Calls From:
# plantid.main (middleware registration)

"""
Plant Identification API Middleware Package

Middleware Components:
    - ErrorHandlingMiddleware: request ids, response timing, last-resort 500 envelope
    - RequestLoggingMiddleware: HTTP request and response logging

Middleware Stack Order:
    1. ErrorHandlingMiddleware (outermost - catches all errors)
    2. RequestLoggingMiddleware (logs all requests/responses)
    3. CORSMiddleware
    4. Application Routes (innermost)

Usage:
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(ErrorHandlingMiddleware)
"""

from typing import Any, Dict

# Middleware configuration constants
MIDDLEWARE_CONFIG = {
    "logging": {
        "enabled": True,
        "slow_request_threshold_ms": 2000,
        "exclude_paths": [
            "/api/health",
        ],
    },
}

# Common HTTP headers used by middleware
COMMON_HEADERS = {
    "REQUEST_ID": "X-Request-ID",
    "RESPONSE_TIME": "X-Response-Time",
}


def get_middleware_config(middleware_name: str) -> Dict[str, Any]:
    """
    Get configuration for a specific middleware

    Args:
        middleware_name: Name of the middleware

    Returns:
        Middleware configuration dictionary
    """
    return MIDDLEWARE_CONFIG.get(middleware_name, {})


def should_exclude_path(middleware_name: str, path: str) -> bool:
    """
    Check whether a path is excluded from a middleware

    Exact matches only, so /api/health/detailed is still logged.
    """
    config = get_middleware_config(middleware_name)
    return path in config.get("exclude_paths", [])


from .error_handling import ErrorHandlingMiddleware, register_exception_handlers  # noqa: E402
from .logging import RequestLoggingMiddleware  # noqa: E402

__all__ = [
    "COMMON_HEADERS",
    "ErrorHandlingMiddleware",
    "MIDDLEWARE_CONFIG",
    "RequestLoggingMiddleware",
    "get_middleware_config",
    "register_exception_handlers",
    "should_exclude_path",
]
