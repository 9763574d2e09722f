"""Repositories wrapping SQLAlchemy sessions."""

from hotdog_backend.database.repositories.save_game import SaveGameRepository

__all__ = ["SaveGameRepository"]
