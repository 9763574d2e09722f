"""High-level orchestration helpers connecting stands to external callers.

This module exposes a thin façade that the API layer uses to manage stands. It
coordinates the persistence adapter and the live :class:`IdleSession` objects
so callers never reach a stand through global lookup.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from hotdog_backend.game_logic.configuration import (
    ProductionConfiguration,
    StandOverrides,
    build_stand_configuration,
)
from hotdog_backend.game_logic.errors import SessionNotInitializedError
from hotdog_backend.game_logic.session import IdleSession

if TYPE_CHECKING:
    from hotdog_backend.game_logic.persistence import GameStateSnapshot, GameStateStore

logger = logging.getLogger(__name__)

DEFAULT_SAVE_TIMEOUT_SECONDS = 5.0


class SessionOrchestrator:
    """Coordinate live stands for the API layer.

    The orchestrator keeps one :class:`IdleSession` per identifier, restores
    stands from the store on first access and routes save requests through the
    session so that every save captures a consistent snapshot.
    """

    def __init__(
        self,
        state_store: GameStateStore,
        *,
        configuration: ProductionConfiguration | None = None,
        save_timeout_seconds: float = DEFAULT_SAVE_TIMEOUT_SECONDS,
    ) -> None:
        self._state_store = state_store
        self._configuration = configuration
        self._save_timeout = save_timeout_seconds
        self._sessions: dict[str, IdleSession] = {}

    @property
    def session_ids(self) -> tuple[str, ...]:
        """Identifiers of the stands currently held in memory."""
        return tuple(self._sessions)

    def start_session(
        self,
        session_id: str,
        *,
        overrides: StandOverrides | None = None,
    ) -> IdleSession:
        """Open a fresh stand for *session_id*, replacing any live one."""
        session = IdleSession.start(session_id, self._configuration_for(overrides))
        self._sessions[session_id] = session
        logger.info("Started stand %s", session_id)
        return session

    def open_session(
        self,
        session_id: str,
        *,
        overrides: StandOverrides | None = None,
    ) -> IdleSession:
        """Return the live stand, restoring or starting it when needed."""
        session = self._sessions.get(session_id)
        if session is not None:
            return session
        snapshot = self._state_store.load_snapshot(session_id)
        if snapshot is None:
            return self.start_session(session_id, overrides=overrides)
        session = IdleSession.restore(
            session_id, snapshot, self._configuration_for(overrides)
        )
        self._sessions[session_id] = session
        logger.info("Restored stand %s from version %s", session_id, snapshot.version)
        return session

    def get_session(self, session_id: str) -> IdleSession:
        """Return the live stand for *session_id*."""
        session = self._sessions.get(session_id)
        if session is None:
            msg = f"Session '{session_id}' has not been initialized."
            raise SessionNotInitializedError(msg)
        return session

    def load_snapshot(self, session_id: str) -> GameStateSnapshot:
        """Return the last stored snapshot of *session_id*."""
        snapshot = self._state_store.load_snapshot(session_id)
        if snapshot is None:
            msg = f"No saved game for session '{session_id}'."
            raise SessionNotInitializedError(msg)
        return snapshot

    async def save_session(self, session_id: str) -> GameStateSnapshot:
        """Persist the live stand for *session_id*."""
        session = self.get_session(session_id)
        return await session.save(
            self._state_store, timeout_seconds=self._save_timeout
        )

    def close_session(self, session_id: str) -> None:
        """Forget the live stand; the stored snapshot is kept."""
        self._sessions.pop(session_id, None)

    def _configuration_for(
        self, overrides: StandOverrides | None
    ) -> ProductionConfiguration:
        if self._configuration is None:
            return build_stand_configuration(overrides)
        return self._configuration.for_stand(overrides)


__all__ = [
    "DEFAULT_SAVE_TIMEOUT_SECONDS",
    "SessionNotInitializedError",
    "SessionOrchestrator",
]
