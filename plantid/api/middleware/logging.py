# 📄 File: plantid/api/middleware/logging.py
# 🧭 Purpose (Layman Explanation):
# This file keeps a diary of every request made to the app: what was asked for, who asked,
# how long it took, and whether it was slow.
# 🧪 Purpose (Technical Summary):
# Request logging middleware writing one structured record per request through PerformanceLogger,
# with client info, excluded health paths and a slow-request warning threshold.
# 🔗 Dependencies:
# FastAPI, starlette, plantid.shared.utils.logging
# 🔄 Connected Modules / Calls From:
# plantid.main (middleware registration)

import time
from typing import Any, Dict

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from plantid.shared.utils.logging import get_logger

from . import get_middleware_config, should_exclude_path

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Request logging middleware for API monitoring

    Features:
    - Structured request/response logging
    - Request timing with slow request warnings
    - Client address tracking
    """

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        config = get_middleware_config("logging")
        self.slow_request_threshold_ms = config.get("slow_request_threshold_ms", 2000)

    async def dispatch(self, request: Request, call_next) -> Response:
        if should_exclude_path("logging", request.url.path):
            return await call_next(request)

        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"❌ {request.method} {request.url.path} failed after {duration_ms:.2f}ms: {type(e).__name__}",
                extra=self._get_client_info(request)
            )
            raise

        duration_ms = (time.time() - start_time) * 1000
        logger.performance.log_request(
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=duration_ms,
            extra=self._get_client_info(request)
        )

        if duration_ms > self.slow_request_threshold_ms:
            logger.warning(
                f"Slow request: {request.method} {request.url.path} took {duration_ms:.2f}ms",
                extra={"event_type": "slow_request", "duration_ms": round(duration_ms, 2)}
            )

        return response

    def _get_client_info(self, request: Request) -> Dict[str, Any]:
        """
        Get client information from the request

        Forwarded headers win over the socket address when running behind a proxy.
        """
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            client_ip = forwarded_for.split(",")[0].strip()
        elif request.client:
            client_ip = request.client.host
        else:
            client_ip = "unknown"

        return {
            "client_ip": client_ip,
            "user_agent": request.headers.get("user-agent"),
        }
