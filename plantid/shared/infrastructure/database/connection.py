# 📄 File: plantid/shared/infrastructure/database/connection.py
#
# 🧭 Purpose (Layman Explanation):
# Manages the connection to the database that keeps identification history and usage
# counters, making sure tables exist and the connection is alive.
#
# 🧪 Purpose (Technical Summary):
# Implements async SQLAlchemy engine management with health checks and retry logic.
# Defaults to an in-memory aiosqlite database shared through a StaticPool so every
# session in the process sees the same data; any async SQLAlchemy URL also works.
#
# 🔗 Dependencies:
# - sqlalchemy (async engine, declarative base)
# - aiosqlite (default SQLite async driver)
# - plantid/shared/config/settings.py (database configuration)
#
# 🔄 Connected Modules / Calls From:
# - plantid/shared/infrastructure/database/session.py (session management)
# - All module ORM models (declarative Base)
# - plantid/api/v1/health.py (database health monitoring)

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from plantid.shared.config.settings import get_settings

logger = logging.getLogger(__name__)

# Shared declarative base for every module's ORM models
Base = declarative_base()


class DatabaseConnectionManager:
    """
    Manages the async database engine with health monitoring
    and automatic retry logic.
    """

    def __init__(self):
        self._engine: Optional[AsyncEngine] = None
        self._database_url: Optional[str] = None
        self._health_check_query = text("SELECT 1")
        self._retry_attempts = 3
        self._retry_delay = 0.5

    def _build_connection_params(self, database_url: str) -> Dict[str, Any]:
        """Build SQLAlchemy engine parameters for the configured URL."""
        settings = get_settings()
        params: Dict[str, Any] = {
            "url": database_url,
            "echo": settings.DB_ECHO,
        }

        if database_url.startswith("sqlite"):
            params["connect_args"] = {"check_same_thread": False}
            if ":memory:" in database_url or database_url.endswith("://"):
                # One shared connection, otherwise each session gets its own empty database
                params["poolclass"] = StaticPool
        else:
            params["pool_pre_ping"] = True
            params["pool_recycle"] = 3600

        return params

    async def initialize(self, database_url: Optional[str] = None) -> None:
        """
        Initialize database engine and create tables.

        Args:
            database_url: Override for settings.DATABASE_URL (used by tests)
        """
        if self._engine is not None:
            logger.warning("Database engine already initialized")
            return

        self._database_url = database_url or get_settings().DATABASE_URL

        try:
            logger.info("Initializing database engine...")
            self._engine = create_async_engine(**self._build_connection_params(self._database_url))
            self._register_connection_events()

            await self.create_tables()

            health = await self.health_check()
            if health["status"] != "healthy":
                raise RuntimeError(health.get("error", "Database health check failed"))

            logger.info(f"✅ Database engine initialized ({self._engine.dialect.name})")

        except Exception as e:
            logger.error(f"❌ Failed to initialize database connection: {e}")
            if self._engine is not None:
                await self._engine.dispose()
                self._engine = None
            raise

    def _register_connection_events(self) -> None:
        """Register SQLAlchemy connection event listeners."""
        if self._engine is None or self._engine.dialect.name != "sqlite":
            return

        @event.listens_for(self._engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    async def create_tables(self) -> None:
        """Create all tables registered on the shared Base."""
        if self._engine is None:
            raise RuntimeError("Database engine not initialized")

        # Importing the ORM modules registers their tables on Base.metadata
        from plantid.modules.plant_identification.infrastructure.database import models as _identification_models  # noqa: F401
        from plantid.modules.subscription_management.infrastructure.database import models as _usage_models  # noqa: F401

        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.debug(f"Tables ensured: {sorted(Base.metadata.tables)}")

    async def health_check(self) -> dict:
        """
        Perform database health check and return structured status.
        """
        if self._engine is None:
            logger.error("Database engine not initialized")
            return {
                "status": "unhealthy",
                "error": "Database engine not initialized",
                "timestamp": datetime.now(timezone.utc).isoformat()
            }

        for attempt in range(self._retry_attempts):
            try:
                async with self._engine.connect() as conn:
                    result = await conn.execute(self._health_check_query)
                    result.scalar()

                logger.debug("Database health check passed")
                return {
                    "status": "healthy",
                    "dialect": self._engine.dialect.name,
                    "timestamp": datetime.now(timezone.utc).isoformat()
                }

            except Exception as e:
                logger.warning(
                    f"Database health check failed (attempt {attempt + 1}/{self._retry_attempts}): {e}"
                )
                if attempt < self._retry_attempts - 1:
                    await asyncio.sleep(self._retry_delay * (2 ** attempt))

        logger.error("Database health check failed after all retry attempts")
        return {
            "status": "unhealthy",
            "error": "Database health check failed after all retry attempts",
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    async def close(self) -> None:
        """Close database engine and all connections."""
        if self._engine is None:
            logger.warning("Database engine not initialized, nothing to close")
            return

        logger.info("Closing database engine...")
        await self._engine.dispose()
        self._engine = None
        logger.info("✅ Database engine closed")

    @property
    def engine(self) -> Optional[AsyncEngine]:
        """Get the SQLAlchemy async engine."""
        return self._engine

    @property
    def is_initialized(self) -> bool:
        """Check if database engine is initialized."""
        return self._engine is not None


# Global database connection manager instance
db_manager = DatabaseConnectionManager()


async def initialize_database(database_url: Optional[str] = None) -> None:
    """Initialize the global database connection manager."""
    try:
        logger.info("Starting database initialization...")
        await db_manager.initialize(database_url)
        logger.info("Database initialization completed successfully.")
    except Exception as e:
        logger.error(f"Failed to initialize database: {str(e)}", exc_info=True)
        raise


async def close_database() -> None:
    """Close the global database connection manager."""
    await db_manager.close()


def get_database_engine() -> AsyncEngine:
    """
    Get the database engine instance.

    Returns:
        AsyncEngine: SQLAlchemy async engine

    Raises:
        RuntimeError: If database is not initialized
    """
    if not db_manager.is_initialized:
        raise RuntimeError("Database not initialized. Call initialize_database() first.")

    return db_manager.engine


async def database_health_check() -> dict:
    """Perform database health check."""
    return await db_manager.health_check()
