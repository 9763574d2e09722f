"""Observer list delivering notification records to interested listeners."""

from __future__ import annotations

import contextlib
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hotdog_backend.shared.events import NotificationBase

Listener = Callable[["NotificationBase"], None]


class NotificationBus:
    """Synchronous publish/subscribe channel owned by a single session.

    The core only pushes plain records here; listeners decide how to forward
    them (WebSocket, UI, test recorder).
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener* and return a callable that removes it again."""
        if listener not in self._listeners:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return _unsubscribe

    def publish(self, event: NotificationBase) -> None:
        """Deliver *event* to every registered listener in subscription order."""
        for listener in list(self._listeners):
            listener(event)

    def __len__(self) -> int:
        return len(self._listeners)


class NotificationRecorder:
    """Listener that keeps every received record, useful for batching responses."""

    def __init__(self) -> None:
        self.events: list[NotificationBase] = []

    def __call__(self, event: NotificationBase) -> None:
        self.events.append(event)

    def drain(self) -> tuple[NotificationBase, ...]:
        """Return and forget the recorded events."""
        events, self.events = tuple(self.events), []
        return events


__all__ = ["Listener", "NotificationBus", "NotificationRecorder"]
