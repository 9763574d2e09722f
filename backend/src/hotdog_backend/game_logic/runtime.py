"""Asynchronous driver that keeps a stand producing in real time."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from hotdog_backend.game_logic.collector import AutoCollectTimer
from hotdog_backend.game_logic.errors import ConfigurationError, PersistenceError
from hotdog_backend.shared.events import AutoCollectConfigured, SaveFailed

if TYPE_CHECKING:
    from hotdog_backend.game_logic.persistence import GameStateStore
    from hotdog_backend.game_logic.session import IdleSession
    from hotdog_backend.shared.events import NotificationBase

logger = logging.getLogger(__name__)

NotificationSender = Callable[["NotificationBase"], Awaitable[None]]

DEFAULT_TICK_INTERVAL_SECONDS = 1.0


class SessionRuntime:
    """Managed runtime that ticks production, auto-collects and autosaves.

    All work runs as tasks on one event loop, and every mutation goes through
    the session lock, so ticks, timer firings and client actions are applied
    one at a time. Notifications published by the session are queued and
    forwarded to the registered senders.
    """

    def __init__(
        self,
        session: IdleSession,
        *,
        store: GameStateStore | None = None,
        tick_interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS,
        autosave_interval_seconds: float | None = None,
        save_timeout_seconds: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if tick_interval_seconds <= 0:
            msg = "Tick interval must be positive."
            raise ConfigurationError(msg)
        if autosave_interval_seconds is not None and autosave_interval_seconds <= 0:
            msg = "Autosave interval must be positive."
            raise ConfigurationError(msg)
        if autosave_interval_seconds is not None and store is None:
            msg = "Autosave requires a state store."
            raise ConfigurationError(msg)

        self._session = session
        self._store = store
        self._tick_interval = tick_interval_seconds
        self._autosave_interval = autosave_interval_seconds
        self._save_timeout = save_timeout_seconds
        self._clock = clock
        self._timer = AutoCollectTimer(
            interval_seconds=session.auto_collect_interval_seconds
        )
        self._senders: list[NotificationSender] = []
        self._tasks: list[asyncio.Task[None]] = []
        self._queue: asyncio.Queue[NotificationBase] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._unsubscribe: Callable[[], None] | None = None
        self._stopped = False

    @property
    def session(self) -> IdleSession:
        """Expose the driven stand."""
        return self._session

    @property
    def is_running(self) -> bool:
        """Return ``True`` while the background tasks are active."""
        return bool(self._tasks)

    @property
    def auto_collect_interval_seconds(self) -> float:
        """Interval currently used by the auto-collect timer."""
        return self._timer.interval_seconds

    def add_sender(self, sender: NotificationSender) -> None:
        """Register a new outbound channel."""
        if sender not in self._senders:
            self._senders.append(sender)

    def remove_sender(self, sender: NotificationSender) -> None:
        """Remove an outbound channel."""
        with contextlib.suppress(ValueError):
            self._senders.remove(sender)

    async def start(self) -> None:
        """Begin ticking, auto-collecting and forwarding notifications."""
        if self._tasks:
            return
        self._stopped = False
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        self._timer.reconfigure(self._session.auto_collect_interval_seconds)
        self._unsubscribe = self._session.bus.subscribe(self._on_notification)
        self._tasks = [
            asyncio.create_task(self._production_loop()),
            asyncio.create_task(self._auto_collect_loop()),
            asyncio.create_task(self._dispatch_loop()),
        ]
        if self._autosave_interval is not None:
            self._tasks.append(asyncio.create_task(self._autosave_loop()))
        logger.info("Runtime started for %s", self._session.session_id)

    async def stop(self) -> None:
        """Stop the background loops."""
        self._stopped = True
        self._timer.cancel()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        results = await asyncio.gather(*tasks, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logger.error(
                    "Runtime task for %s failed: %r", self._session.session_id, result
                )
        logger.info("Runtime stopped for %s", self._session.session_id)

    async def rebind(self, session: IdleSession) -> None:
        """Drive *session* from now on, keeping the registered senders."""
        running = self.is_running
        if running:
            await self.stop()
        self._session = session
        if running:
            await self.start()

    async def save(self) -> bool:
        """Save the stand, reporting failures instead of raising them."""
        if self._store is None:
            msg = "Runtime has no state store configured."
            raise ConfigurationError(msg)
        try:
            await self._session.save(self._store, timeout_seconds=self._save_timeout)
        except PersistenceError as exc:
            logger.warning("Save failed for %s: %s", self._session.session_id, exc)
            self._session.bus.publish(SaveFailed(reason=str(exc)))
            return False
        return True

    def _on_notification(self, event: NotificationBase) -> None:
        """Bus listener; may be invoked from worker threads."""
        loop = self._loop
        queue = self._queue
        if loop is None or queue is None or loop.is_closed():
            return
        if isinstance(event, AutoCollectConfigured):
            loop.call_soon_threadsafe(self._timer.reconfigure, event.interval_seconds)
        loop.call_soon_threadsafe(queue.put_nowait, event)

    async def _production_loop(self) -> None:
        last = self._clock()
        while not self._stopped:
            await asyncio.sleep(self._tick_interval)
            now = self._clock()
            self._session.tick(now - last)
            last = now

    async def _auto_collect_loop(self) -> None:
        async for _tick in self._timer.ticks():
            if self._session.auto_collect_enabled:
                self._session.collect(automatic=True)

    async def _autosave_loop(self) -> None:
        assert self._autosave_interval is not None  # noqa: S101
        while not self._stopped:
            await asyncio.sleep(self._autosave_interval)
            await self.save()

    async def _dispatch_loop(self) -> None:
        assert self._queue is not None  # noqa: S101
        while True:
            event = await self._queue.get()
            for sender in list(self._senders):
                try:
                    await sender(event)
                except Exception:
                    logger.exception(
                        "Dropping sender for %s after a failed send",
                        self._session.session_id,
                    )
                    self.remove_sender(sender)


__all__ = [
    "DEFAULT_TICK_INTERVAL_SECONDS",
    "NotificationSender",
    "SessionRuntime",
]
