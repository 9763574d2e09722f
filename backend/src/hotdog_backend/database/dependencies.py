"""Cached providers for database access."""

from functools import cache

from hotdog_backend.database.service import DatabaseService


@cache
def build_database_service(database_url: str) -> DatabaseService:
    """Create a cached :class:`DatabaseService` for the given connection string."""
    return DatabaseService(database_url)
