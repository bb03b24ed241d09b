"""
Database infrastructure: async engine, declarative Base and session management.
"""

from .connection import Base, db_manager, close_database, initialize_database
from .session import session_manager

__all__ = [
    "Base",
    "db_manager",
    "close_database",
    "initialize_database",
    "session_manager",
]
