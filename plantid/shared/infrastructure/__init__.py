"""
Infrastructure layer package for the plant identification backend.
Provides the database engine/sessions and external API clients.
"""

__all__ = []
