"""Stand orchestration service exposed to the API layer."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from hotdog_backend.database import DatabaseGameStateStore, build_database_service
from hotdog_backend.game_logic import (
    InMemoryGameStateStore,
    NotificationRecorder,
    SessionOrchestrator,
    SessionRuntime,
)
from hotdog_backend.settings import BackendSettings, get_settings

if TYPE_CHECKING:
    from hotdog_backend.game_logic import (
        GameStateSnapshot,
        GameStateStore,
        IdleSession,
        PurchaseResult,
        StandOverrides,
    )
    from hotdog_backend.shared import Money, NotificationBase, UpgradeKind

logger = logging.getLogger(__name__)


class GameSessionService:
    """Manage live stands and their runtimes on behalf of the routers."""

    def __init__(
        self,
        *,
        orchestrator: SessionOrchestrator,
        state_store: GameStateStore,
        settings: BackendSettings,
    ) -> None:
        self._orchestrator = orchestrator
        self._state_store = state_store
        self._settings = settings
        self._runtimes: dict[str, SessionRuntime] = {}
        self._connections: dict[str, int] = {}

    @classmethod
    def create_default(
        cls, settings: BackendSettings | None = None
    ) -> GameSessionService:
        """Return a service wired to the store selected in *settings*."""
        config = settings or get_settings()
        state_store: GameStateStore
        if config.save_backend == "database":
            database = build_database_service(config.database_url)
            database.create_schema()
            state_store = DatabaseGameStateStore(database)
        else:
            state_store = InMemoryGameStateStore()
        orchestrator = SessionOrchestrator(
            state_store, save_timeout_seconds=config.save_timeout_seconds
        )
        return cls(orchestrator=orchestrator, state_store=state_store, settings=config)

    async def open_session(
        self,
        session_id: str,
        *,
        fresh: bool = False,
        overrides: StandOverrides | None = None,
    ) -> IdleSession:
        """Return the live stand for *session_id*, restoring or starting it.

        A fresh start replaces the live stand; a running runtime for the same
        id is moved onto the new stand.
        """
        if not fresh:
            return self._orchestrator.open_session(session_id, overrides=overrides)
        session = self._orchestrator.start_session(session_id, overrides=overrides)
        runtime = self._runtimes.get(session_id)
        if runtime is not None:
            await runtime.rebind(session)
        return session

    def get_session(self, session_id: str) -> IdleSession:
        """Return the live stand for *session_id*."""
        return self._orchestrator.get_session(session_id)

    def advance(
        self, session_id: str, elapsed_seconds: float
    ) -> tuple[NotificationBase, ...]:
        """Produce for *elapsed_seconds* and return emitted notifications."""
        session = self.get_session(session_id)
        recorder = NotificationRecorder()
        unsubscribe = session.bus.subscribe(recorder)
        try:
            session.tick(elapsed_seconds)
        finally:
            unsubscribe()
        return recorder.drain()

    def collect(self, session_id: str) -> tuple[Money, tuple[NotificationBase, ...]]:
        """Collect the stock of *session_id* into cash."""
        session = self.get_session(session_id)
        recorder = NotificationRecorder()
        unsubscribe = session.bus.subscribe(recorder)
        try:
            credited = session.collect()
        finally:
            unsubscribe()
        return credited, recorder.drain()

    def purchase(
        self, session_id: str, kind: UpgradeKind
    ) -> tuple[PurchaseResult, tuple[NotificationBase, ...]]:
        """Buy the next *kind* upgrade for *session_id*."""
        session = self.get_session(session_id)
        recorder = NotificationRecorder()
        unsubscribe = session.bus.subscribe(recorder)
        try:
            result = session.purchase(kind)
        finally:
            unsubscribe()
        return result, recorder.drain()

    def configure_auto_collect(
        self,
        session_id: str,
        *,
        enabled: bool | None = None,
        interval_seconds: float | None = None,
    ) -> IdleSession:
        """Change the auto-collect settings of *session_id*."""
        session = self.get_session(session_id)
        session.configure_auto_collect(enabled=enabled, interval_seconds=interval_seconds)
        return session

    async def save(self, session_id: str) -> GameStateSnapshot:
        """Persist the live stand for *session_id*."""
        return await self._orchestrator.save_session(session_id)

    def load_snapshot(self, session_id: str) -> GameStateSnapshot:
        """Return the last stored snapshot of *session_id*."""
        return self._orchestrator.load_snapshot(session_id)

    async def acquire_runtime(self, session_id: str) -> SessionRuntime:
        """Return a running runtime for *session_id*, starting it if needed."""
        runtime = self._runtimes.get(session_id)
        if runtime is None:
            runtime = SessionRuntime(
                self.get_session(session_id),
                store=self._state_store,
                tick_interval_seconds=self._settings.tick_interval_seconds,
                autosave_interval_seconds=self._settings.autosave_interval_seconds,
                save_timeout_seconds=self._settings.save_timeout_seconds,
            )
            self._runtimes[session_id] = runtime
        self._connections[session_id] = self._connections.get(session_id, 0) + 1
        await runtime.start()
        return runtime

    async def release_runtime(self, session_id: str) -> None:
        """Drop one connection; stop and save once nobody is watching."""
        remaining = self._connections.get(session_id, 0) - 1
        if remaining > 0:
            self._connections[session_id] = remaining
            return
        self._connections.pop(session_id, None)
        runtime = self._runtimes.pop(session_id, None)
        if runtime is None:
            return
        await runtime.stop()
        await runtime.save()

    async def shutdown(self) -> None:
        """Stop every runtime and save its stand."""
        for session_id in list(self._runtimes):
            self._connections.pop(session_id, None)
            runtime = self._runtimes.pop(session_id)
            await runtime.stop()
            await runtime.save()
        logger.info("Game session service shut down")


__all__ = ["GameSessionService"]
