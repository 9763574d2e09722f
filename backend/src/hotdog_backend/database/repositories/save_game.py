"""Repository helpers for working with save games."""

from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from hotdog_backend.database.schemas import SaveGameSchema
from hotdog_backend.game_logic.persistence import as_utc


class SaveGameRepository:
    """Encapsulates persistence operations for :class:`SaveGameSchema`."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, session_id: str) -> SaveGameSchema | None:
        """Return the save row of a stand, if any."""
        return self._session.get(SaveGameSchema, session_id)

    def upsert(
        self,
        session_id: str,
        *,
        version: int,
        payload: dict[str, Any],
        saved_at: datetime,
    ) -> bool:
        """Insert or overwrite the save row of a stand.

        Returns ``False`` without writing when the stored row is newer than
        *saved_at*.
        """
        record = self._session.get(SaveGameSchema, session_id, with_for_update=True)
        if record is None:
            record = SaveGameSchema(
                session_id=session_id,
                version=version,
                payload=payload,
                saved_at=saved_at,
            )
            self._session.add(record)
        elif as_utc(record.saved_at) > as_utc(saved_at):
            return False
        else:
            record.version = version
            record.payload = payload
            record.saved_at = saved_at
        self._session.flush()
        return True
