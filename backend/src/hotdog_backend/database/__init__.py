"""Database connectivity helpers and configuration objects."""

from hotdog_backend.database.base import BaseSchema
from hotdog_backend.database.dependencies import build_database_service
from hotdog_backend.database.repositories import SaveGameRepository
from hotdog_backend.database.schemas import SaveGameSchema
from hotdog_backend.database.service import DatabaseService
from hotdog_backend.database.store import DatabaseGameStateStore
from hotdog_backend.settings import BackendSettings, get_settings

__all__ = [
    "BackendSettings",
    "BaseSchema",
    "DatabaseGameStateStore",
    "DatabaseService",
    "SaveGameRepository",
    "SaveGameSchema",
    "build_database_service",
    "get_settings",
]
