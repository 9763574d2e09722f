"""Persistence abstractions for stand snapshots.

These interfaces let the game logic layer store the authoritative state of a
running stand without depending on the database layer. The API layer provides
concrete adapters (in-memory, database-backed) that comply with these
protocols.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping  # noqa: TC003
from datetime import UTC, datetime
from typing import Any, Protocol

from pydantic import BaseModel, Field, ValidationError, model_validator
from pydantic.config import ConfigDict

from hotdog_backend.game_logic.configuration import get_default_production_configuration
from hotdog_backend.game_logic.errors import ConfigurationError, PersistenceError
from hotdog_backend.game_logic.state import AccumulatorState, UpgradeTrack
from hotdog_backend.shared.value_objects import Money, UpgradeKind

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


def _now() -> datetime:
    return datetime.now(tz=UTC)


def _default_accumulator() -> AccumulatorState:
    return AccumulatorState.initial(get_default_production_configuration())


def _default_rate_track() -> UpgradeTrack:
    return UpgradeTrack.initial(
        UpgradeKind.RATE, get_default_production_configuration()
    )


def _default_capacity_track() -> UpgradeTrack:
    return UpgradeTrack.initial(
        UpgradeKind.CAPACITY, get_default_production_configuration()
    )


def _default_balance() -> Money:
    return get_default_production_configuration().starting_balance


_NESTED_DEFAULTS: dict[str, Callable[[], BaseModel]] = {
    "accumulator": _default_accumulator,
    "rate_track": _default_rate_track,
    "capacity_track": _default_capacity_track,
    "balance": _default_balance,
}


def _default_auto_collect_enabled() -> bool:
    return get_default_production_configuration().auto_collect_enabled


def _default_auto_collect_interval() -> float:
    return get_default_production_configuration().auto_collect_interval_seconds


class GameStateSnapshot(BaseModel):
    """Immutable, versioned save record of a stand.

    Unknown fields are ignored on load; missing fields fall back to the values
    of the default production configuration. ``version`` is mandatory.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    version: int = Field(..., ge=1)
    saved_at: datetime = Field(default_factory=_now)
    accumulator: AccumulatorState = Field(default_factory=_default_accumulator)
    rate_track: UpgradeTrack = Field(default_factory=_default_rate_track)
    capacity_track: UpgradeTrack = Field(default_factory=_default_capacity_track)
    balance: Money = Field(default_factory=_default_balance)
    auto_collect_enabled: bool = Field(default_factory=_default_auto_collect_enabled)
    auto_collect_interval_seconds: float = Field(
        default_factory=_default_auto_collect_interval, gt=0
    )

    @model_validator(mode="before")
    @classmethod
    def _fill_nested_defaults(cls, data: Any) -> Any:
        """Complete partial nested records from the default configuration."""
        if not isinstance(data, Mapping):
            return data
        merged = dict(data)
        for field, default_factory in _NESTED_DEFAULTS.items():
            value = merged.get(field)
            if isinstance(value, Mapping):
                merged[field] = {**default_factory().model_dump(), **value}
        return merged

    @model_validator(mode="after")
    def _validate_tracks(self) -> GameStateSnapshot:
        """Ensure each track is stored under its own field."""
        if self.rate_track.kind is not UpgradeKind.RATE:
            msg = "rate_track must describe the rate upgrade."
            raise ValueError(msg)
        if self.capacity_track.kind is not UpgradeKind.CAPACITY:
            msg = "capacity_track must describe the capacity upgrade."
            raise ValueError(msg)
        if self.version > SNAPSHOT_VERSION:
            logger.warning(
                "Loading snapshot version %s with reader version %s",
                self.version,
                SNAPSHOT_VERSION,
            )
        return self

    def track(self, kind: UpgradeKind) -> UpgradeTrack:
        """Return the stored track for *kind*."""
        if kind is UpgradeKind.RATE:
            return self.rate_track
        return self.capacity_track

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-compatible mapping describing the snapshot."""
        return self.model_dump(mode="json")

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> GameStateSnapshot:
        """Rebuild a snapshot from a stored mapping.

        Raises :class:`PersistenceError` when the payload cannot be decoded.
        """
        try:
            return cls.model_validate(dict(payload))
        except (ValidationError, ConfigurationError) as exc:
            msg = f"Stored snapshot is malformed: {exc}"
            raise PersistenceError(msg) from exc


class GameStateStore(Protocol):
    """Protocol describing how stand snapshots are persisted.

    Stores keep the newest snapshot per stand: a write whose ``saved_at`` is
    older than the stored one is ignored, so a late write from a timed-out save
    never replaces newer progress.
    """

    def save_snapshot(self, session_id: str, snapshot: GameStateSnapshot) -> None:
        """Persist *snapshot* for *session_id* unless a newer one is stored."""

    def load_snapshot(self, session_id: str) -> GameStateSnapshot | None:
        """Return the latest stored snapshot for *session_id* or ``None``."""


class InMemoryGameStateStore:
    """Trivial in-memory implementation of :class:`GameStateStore`.

    Snapshots are stored as JSON payloads so that loading exercises the same
    decoding path as the database store.
    """

    def __init__(self) -> None:
        self._payloads: dict[str, dict[str, Any]] = {}
        self._saved_at: dict[str, datetime] = {}
        self._lock = threading.Lock()

    def save_snapshot(self, session_id: str, snapshot: GameStateSnapshot) -> None:
        """Store *snapshot* keyed by *session_id*."""
        with self._lock:
            stored_at = self._saved_at.get(session_id)
            if stored_at is not None and as_utc(stored_at) > as_utc(snapshot.saved_at):
                logger.info("Ignoring stale snapshot for %s", session_id)
                return
            self._payloads[session_id] = snapshot.to_payload()
            self._saved_at[session_id] = snapshot.saved_at

    def load_snapshot(self, session_id: str) -> GameStateSnapshot | None:
        """Return the stored snapshot for *session_id* if available."""
        with self._lock:
            payload = self._payloads.get(session_id)
        if payload is None:
            return None
        return GameStateSnapshot.from_payload(payload)


def as_utc(moment: datetime) -> datetime:
    """Treat naive timestamps as UTC so they compare with aware ones."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


__all__ = [
    "SNAPSHOT_VERSION",
    "GameStateSnapshot",
    "GameStateStore",
    "InMemoryGameStateStore",
    "as_utc",
]
