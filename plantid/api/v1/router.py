# 📄 File: plantid/api/v1/router.py
# 🧭 Purpose (Layman Explanation):
# This file acts like a traffic director for API requests, sending photo identifications to the plant
# handlers and usage or payment requests to the subscription handlers.
# 🧪 Purpose (Technical Summary):
# Main API router aggregation combining the health router and every module router under one
# APIRouter, mounted by plantid.main at the /api prefix.
# 🔗 Dependencies:
# FastAPI, plantid.api.v1.health, plantid.modules.*.presentation.api.v1
# 🔄 Connected Modules / Calls From:
# plantid.main

import logging

from fastapi import APIRouter

from plantid.modules.plant_identification.presentation.api.v1 import identification_router
from plantid.modules.subscription_management.presentation.api.v1 import (
    subscriptions_router,
    usage_router,
)

from .health import health_router

logger = logging.getLogger(__name__)

# Create main API router
api_router = APIRouter()

# Include health check router
api_router.include_router(health_router)

# =========================================================================
# MODULE ROUTERS
# =========================================================================

api_router.include_router(identification_router)
api_router.include_router(usage_router)
api_router.include_router(subscriptions_router)

logger.debug(f"API router assembled with {len(api_router.routes)} routes")

__all__ = ["api_router"]
