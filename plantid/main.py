# 📄 File: plantid/main.py
#
# 🧭 Purpose (Layman Explanation):
# The main control center that starts up the plant identification service, connects all the different parts
# together, and makes sure everything is ready to handle photos from the mobile app.
#
# 🧪 Purpose (Technical Summary):
# FastAPI application factory and entry point with lifespan management (logging, database, session
# factory, classifier registry), middleware setup, exception handlers and router registration.
#
# 🔗 Dependencies:
# - FastAPI framework, uvicorn
# - plantid.shared.config.settings
# - plantid.shared.infrastructure.database (connection, session)
# - plantid.api (middleware, v1 router)
#
# 🔄 Connected Modules / Calls From:
# - uvicorn server startup
# - Docker container entry point
# - Test suite (create_application)

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware

from plantid.api import API_PREFIX, DEFAULT_HEADERS
from plantid.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    register_exception_handlers,
)
from plantid.api.v1 import get_api_info
from plantid.api.v1.router import api_router
from plantid.modules.plant_identification.infrastructure.external.provider_registry import build_classifier_registry
from plantid.shared.config.settings import get_settings
from plantid.shared.core.rate_limiter import limiter
from plantid.shared.infrastructure.database.connection import close_database, initialize_database
from plantid.shared.infrastructure.database.session import session_manager
from plantid.shared.utils.logging import get_logger, log_shutdown_event, log_startup_event, setup_logging

# Get application settings
settings = get_settings()

# Setup logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Handles startup and shutdown events for the FastAPI application,
    including database connections and classification provider clients.
    """
    log_startup_event(settings.APP_NAME, settings.APP_VERSION, extra={"environment": settings.ENVIRONMENT})

    try:
        # Initialize database connection
        await initialize_database(settings.DATABASE_URL)
        logger.info("✅ Database connection initialized")

        await session_manager.initialize()
        logger.info("✅ Session manager initialized")

        # Initialize classification providers
        registry = build_classifier_registry(settings)
        app.state.classifier_registry = registry
        if registry.provider_names:
            logger.info(f"✅ Classification providers ready: {', '.join(registry.provider_names)}")
        else:
            logger.warning("No classification provider configured; identification requests will return 503")

        if not settings.stripe_configured:
            logger.warning("Stripe is not configured; subscription endpoints will return 503")

        logger.info("✅ Plant Identification API startup complete")

    except Exception as e:
        logger.error(f"❌ Startup failed: {e}", exc_info=True)
        raise

    yield  # Application is running

    # Shutdown events
    log_shutdown_event(settings.APP_NAME)

    try:
        registry = getattr(app.state, "classifier_registry", None)
        if registry is not None:
            await registry.close()
            app.state.classifier_registry = None
            logger.info("✅ Provider clients closed")

        session_manager.reset()
        await close_database()
        logger.info("✅ Plant Identification API shutdown complete")

    except Exception as e:
        logger.error(f"❌ Shutdown error: {e}", exc_info=True)


def create_application() -> FastAPI:
    """
    Application factory function.

    Creates and configures the FastAPI application with all necessary
    middleware, routers, and settings based on the current environment.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan,
        debug=settings.DEBUG,
    )

    # slowapi looks the limiter up on app.state
    app.state.limiter = limiter

    # =========================================================================
    # EXCEPTION HANDLERS
    # =========================================================================

    register_exception_handlers(app)

    # =========================================================================
    # MIDDLEWARE CONFIGURATION
    # =========================================================================

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Response-Time"],
    )

    @app.middleware("http")
    async def api_version_header(request, call_next):
        response: Response = await call_next(request)
        response.headers.update(DEFAULT_HEADERS)
        return response

    # Request logging middleware
    if not settings.is_testing:
        app.add_middleware(RequestLoggingMiddleware)

    # Error handling middleware (added last so it wraps everything)
    app.add_middleware(ErrorHandlingMiddleware)

    # =========================================================================
    # ROUTER REGISTRATION
    # =========================================================================

    app.include_router(api_router, prefix=API_PREFIX)

    # =========================================================================
    # ROOT ENDPOINTS
    # =========================================================================

    @app.get("/", tags=["API Info"])
    async def root() -> dict:
        """Root endpoint with service information."""
        return get_api_info()

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        """Favicon endpoint to prevent 404 errors."""
        return Response(status_code=204)

    return app


# Create the FastAPI application
app = create_application()


def main():
    """
    Main function for running the application in development.

    Used when running the application directly with python -m plantid.main
    or through the plantid-api script entry point.
    """
    uvicorn.run(
        "plantid.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD and settings.is_development,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
