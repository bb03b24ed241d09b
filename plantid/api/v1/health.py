# 📄 File: plantid/api/v1/health.py
# 🧭 Purpose (Layman Explanation):
# This file provides health check endpoints that tell us if the plant identification service is working,
# like a doctor's checkup for the database, the identification providers and the machine itself.
# 🧪 Purpose (Technical Summary):
# Health check endpoints: a cheap liveness check for load balancers and a detailed check covering
# database connectivity, classifier provider circuits (rotation stats) and psutil system metrics.
# 🔗 Dependencies:
# FastAPI, psutil, plantid.shared.infrastructure.database.connection, provider_registry
# 🔄 Connected Modules / Calls From:
# plantid.api.v1.router, monitoring systems, load balancers

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import psutil
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from plantid.modules.plant_identification.infrastructure.external.provider_registry import ClassifierRegistry
from plantid.shared.config.settings import get_settings
from plantid.shared.infrastructure.database.connection import database_health_check as db_health_check

logger = logging.getLogger(__name__)

# Create router for health endpoints
health_router = APIRouter()

# Application start time for uptime calculation
_app_start_time = datetime.now(timezone.utc)

SERVICE_NAME = "plant-identification-api"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@health_router.get("/health",
                  summary="Basic Health Check",
                  description="Basic health check endpoint for load balancers and monitoring",
                  tags=["Health Check"])
async def health_check() -> JSONResponse:
    """
    Basic health check endpoint

    Returns simple OK status for quick health verification.
    """
    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "timestamp": _now(),
            "service": SERVICE_NAME,
            "version": get_settings().APP_VERSION
        }
    )


@health_router.get("/health/detailed",
                  summary="Detailed Health Check",
                  description="Comprehensive health check including all system components",
                  tags=["Health Check"])
async def detailed_health_check(request: Request) -> JSONResponse:
    """
    Comprehensive health check for all system components

    Checks the health of:
    - Database connectivity
    - Plant identification providers (circuit breakers)
    - System resources

    Returns 503 only when the database is down; provider or resource
    problems degrade the status but the service keeps answering.
    """
    start_time = datetime.now(timezone.utc)
    overall_status = "healthy"
    components: Dict[str, Any] = {}

    # Check database health
    try:
        db_health = await db_health_check()
    except Exception as e:
        logger.error(f"Database health check raised: {e}")
        db_health = {"status": "unhealthy", "error": str(e), "timestamp": _now()}
    components["database"] = db_health
    if db_health["status"] != "healthy":
        overall_status = "unhealthy"

    # Check identification providers
    providers = _check_providers_health(getattr(request.app.state, "classifier_registry", None))
    components["providers"] = providers
    if providers["status"] != "healthy" and overall_status == "healthy":
        overall_status = "degraded"

    # Get system metrics
    system_metrics = _get_system_metrics()
    components["system"] = system_metrics
    if system_metrics["status"] != "healthy" and overall_status == "healthy":
        overall_status = "degraded"

    response_time = (datetime.now(timezone.utc) - start_time).total_seconds()

    return JSONResponse(
        status_code=503 if overall_status == "unhealthy" else 200,
        content={
            "status": overall_status,
            "timestamp": _now(),
            "service": SERVICE_NAME,
            "version": get_settings().APP_VERSION,
            "environment": get_settings().ENVIRONMENT,
            "uptime_seconds": (datetime.now(timezone.utc) - _app_start_time).total_seconds(),
            "response_time_seconds": response_time,
            "components": components
        }
    )


def _check_providers_health(registry: Optional[ClassifierRegistry]) -> Dict[str, Any]:
    """Summarize provider circuits from the classifier registry"""
    if registry is None or not registry.provider_names:
        return {
            "status": "no_providers",
            "providers": [],
            "timestamp": _now()
        }

    registry_status = registry.get_status()
    rotation = registry_status["rotation"]
    endpoints = rotation["endpoints"]
    open_circuits = [ep["name"] for ep in endpoints if ep["circuit_state"] == "open"]

    if not open_circuits:
        status = "healthy"
    elif len(open_circuits) < len(endpoints):
        status = "degraded"
    else:
        status = "unhealthy"

    return {
        "status": status,
        "providers": registry.provider_names,
        "open_circuits": open_circuits,
        "endpoints": endpoints,
        "recent_errors": registry_status["recent_errors"],
        "timestamp": _now()
    }


def _get_system_metrics() -> Dict[str, Any]:
    """Get basic system metrics"""
    try:
        cpu_percent = psutil.cpu_percent(interval=None)
        memory_percent = psutil.virtual_memory().percent
        disk = psutil.disk_usage('/')
        disk_percent = (disk.used / disk.total) * 100

        status = "healthy"
        if cpu_percent > 90 or memory_percent > 90 or disk_percent > 95:
            status = "degraded"

        return {
            "status": status,
            "cpu_percent": cpu_percent,
            "memory_percent": memory_percent,
            "disk_percent": round(disk_percent, 2),
            "timestamp": _now()
        }

    except Exception as e:
        return {
            "status": "error",
            "error": str(e),
            "timestamp": _now()
        }
