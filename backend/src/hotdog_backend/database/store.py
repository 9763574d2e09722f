"""Database-backed implementation of the game state store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from hotdog_backend.database.repositories import SaveGameRepository
from hotdog_backend.game_logic.errors import PersistenceError
from hotdog_backend.game_logic.persistence import GameStateSnapshot

if TYPE_CHECKING:
    from hotdog_backend.database.service import DatabaseService

logger = logging.getLogger(__name__)


class DatabaseGameStateStore:
    """Store snapshots as JSON payloads in the ``save_games`` table."""

    def __init__(self, database: DatabaseService) -> None:
        self._database = database

    def save_snapshot(self, session_id: str, snapshot: GameStateSnapshot) -> None:
        """Insert or replace the save row of *session_id* unless it is newer."""
        try:
            with self._database.session() as session:
                written = SaveGameRepository(session).upsert(
                    session_id,
                    version=snapshot.version,
                    payload=snapshot.to_payload(),
                    saved_at=snapshot.saved_at,
                )
        except SQLAlchemyError as exc:
            logger.exception("Could not save %s", session_id)
            msg = f"Database rejected save for '{session_id}'."
            raise PersistenceError(msg) from exc
        if not written:
            logger.info("Ignoring stale snapshot for %s", session_id)

    def load_snapshot(self, session_id: str) -> GameStateSnapshot | None:
        """Return the stored snapshot of *session_id*, if any."""
        try:
            with self._database.session() as session:
                record = SaveGameRepository(session).get(session_id)
                payload = dict(record.payload) if record is not None else None
        except SQLAlchemyError as exc:
            logger.exception("Could not load %s", session_id)
            msg = f"Database rejected load for '{session_id}'."
            raise PersistenceError(msg) from exc
        if payload is None:
            return None
        return GameStateSnapshot.from_payload(payload)


__all__ = ["DatabaseGameStateStore"]
