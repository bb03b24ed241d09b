# 📄 File: plantid/shared/core/rate_limiter.py
# 🧭 Purpose (Layman Explanation):
# Stops a single client from hammering the identification endpoint with too many requests per minute.
# 🧪 Purpose (Technical Summary):
# Shared slowapi Limiter keyed by client address, toggled by RATE_LIMIT_ENABLED, plus the
# RateLimitExceeded handler that renders the standard error envelope.
# 🔗 Dependencies:
# slowapi, fastapi, plantid.shared.config.settings
# 🔄 Connected Modules / Calls From:
# plantid.main (app.state.limiter and exception handler),
# plant_identification presentation routes (@limiter.limit)

import logging
from datetime import datetime, timezone

from fastapi import Request, status
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from plantid.shared.config.settings import get_settings

logger = logging.getLogger(__name__)

_settings = get_settings()

# Rate limiting configuration
limiter = Limiter(
    key_func=get_remote_address,
    enabled=_settings.RATE_LIMIT_ENABLED,
    headers_enabled=False,
)


def identify_rate_limit() -> str:
    """Rate limit string applied to the identification endpoint."""
    return get_settings().IDENTIFY_RATE_LIMIT


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Render slowapi's RateLimitExceeded in the standard error envelope."""
    request_id = getattr(request.state, "request_id", None)
    logger.warning(f"🚦 Rate limit exceeded for {get_remote_address(request)} on {request.url.path}: {exc.detail}")

    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "error": {
                "code": "RATE_LIMIT_EXCEEDED",
                "message": "Too many requests. Please slow down.",
                "details": {"limit": str(exc.detail)},
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "request_id": request_id,
            }
        },
    )
