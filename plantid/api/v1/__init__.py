# 📄 File: plantid/api/v1/__init__.py
# 🧭 Purpose (Layman Explanation):
# This file organizes version 1 of our API so new versions can be added later without breaking existing apps.
# 🧪 Purpose (Technical Summary):
# Package initialization for API version 1: version metadata and the API info document served at "/".
# 🔗 Dependencies:
# plantid.shared.config.settings
# 🔄 Connected Modules / Calls From:
# plantid.api.v1.router, plantid.main

"""
Plant Identification API Version 1

Structure:
    v1/
    ├── __init__.py          # This file
    ├── router.py            # Main router aggregation
    └── health.py            # Health check endpoints

Module routers live with their modules:
    plant_identification/presentation/api/v1/identification.py
    subscription_management/presentation/api/v1/usage.py
    subscription_management/presentation/api/v1/subscriptions.py
"""

from typing import Any, Dict

from plantid.shared.config.settings import get_settings

# API v1 metadata
__api_version__ = "v1"

# Public endpoints, relative to the /api prefix
ENDPOINTS = {
    "identify_plant": "POST /identify-plant",
    "history": "GET /history/{userId}",
    "usage": "GET /usage/{userId}",
    "create_subscription": "POST /create-subscription",
    "subscription_success": "POST /subscription-success",
    "cancel_subscription": "POST /cancel-subscription",
    "stripe_webhook": "POST /stripe/webhook",
    "health": "GET /health",
    "detailed_health": "GET /health/detailed",
}


def get_api_info() -> Dict[str, Any]:
    """
    Get service information for the root endpoint

    Returns:
        Dictionary with service name, version and endpoint listing
    """
    settings = get_settings()
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "description": settings.APP_DESCRIPTION,
        "environment": settings.ENVIRONMENT,
        "api_version": __api_version__,
        "api_base": "/api",
        "docs_url": "/docs" if settings.DEBUG else None,
        "endpoints": ENDPOINTS,
        "quotas": {
            "free_daily_limit": settings.FREE_DAILY_LIMIT,
            "trial_days": settings.TRIAL_DAYS,
            "premium_monthly_limit": settings.PREMIUM_MONTHLY_LIMIT or None,
        },
    }


__all__ = ["ENDPOINTS", "get_api_info"]
