"""SQLAlchemy schemas."""

from hotdog_backend.database.schemas.save_game import SaveGameSchema

__all__ = ["SaveGameSchema"]
