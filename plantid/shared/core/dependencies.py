"""
Common FastAPI dependencies for the plant identification backend.
Provides database access, settings and request context to route handlers.
"""

import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from ..config.settings import Settings, get_settings
from ..infrastructure.database.session import session_manager
from ..utils.logging import bind_user

logger = logging.getLogger(__name__)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Get a request-scoped database session.

    Commits when the handler returns normally and rolls back when it raises.

    Yields:
        AsyncSession: Database session
    """
    async with session_manager.get_session() as session:
        yield session


def get_app_settings() -> Settings:
    """Settings dependency, overridable in tests through app.dependency_overrides."""
    return get_settings()



def bind_user_context(user_id: str) -> str:
    """
    Attach the user id to log records for the rest of the request.

    Args:
        user_id: Opaque client user id

    Returns:
        str: The same user id
    """
    bind_user(user_id)
    logger.debug(f"User context bound: {user_id}")
    return user_id
