"""A single hot dog stand: production, collection, upgrades and saving.

:class:`IdleSession` wires the accumulator, collector, upgrade ledger and
wallet together through explicit constructor arguments and serializes every
mutation behind one re-entrant lock. The asyncio runtime, the auto-collect
timer and HTTP handlers can therefore all drive the same stand without
observing partial updates.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from hotdog_backend.game_logic.accumulator import Accumulator
from hotdog_backend.game_logic.collector import Collector
from hotdog_backend.game_logic.currency import CurrencyLedger, Wallet
from hotdog_backend.game_logic.errors import ConfigurationError, PersistenceError
from hotdog_backend.game_logic.notifications import NotificationBus
from hotdog_backend.game_logic.persistence import (
    SNAPSHOT_VERSION,
    GameStateSnapshot,
    as_utc,
)
from hotdog_backend.game_logic.state import AccumulatorState, UpgradeTrack
from hotdog_backend.game_logic.upgrades import PurchaseResult, UpgradeLedger
from hotdog_backend.shared.events import (
    AutoCollectConfigured,
    BalanceChanged,
    CapacityUpgraded,
    Collected,
    ProductionUpdated,
    RateUpgraded,
)
from hotdog_backend.shared.value_objects import Money, UpgradeKind

if TYPE_CHECKING:
    from decimal import Decimal

    from hotdog_backend.game_logic.configuration import ProductionConfiguration
    from hotdog_backend.game_logic.persistence import GameStateStore

logger = logging.getLogger(__name__)


class IdleSession:
    """Authoritative in-memory state of one stand."""

    def __init__(
        self,
        session_id: str,
        *,
        configuration: ProductionConfiguration,
        accumulator: Accumulator,
        currency: CurrencyLedger,
        collector: Collector,
        ledger: UpgradeLedger,
        rate_track: UpgradeTrack,
        capacity_track: UpgradeTrack,
        bus: NotificationBus | None = None,
        auto_collect_enabled: bool | None = None,
        auto_collect_interval_seconds: float | None = None,
    ) -> None:
        self._session_id = session_id
        self._configuration = configuration
        self._accumulator = accumulator
        self._currency = currency
        self._collector = collector
        self._ledger = ledger
        self._tracks = {
            UpgradeKind.RATE: rate_track,
            UpgradeKind.CAPACITY: capacity_track,
        }
        self._bus = bus or NotificationBus()
        self._auto_collect_enabled = (
            configuration.auto_collect_enabled
            if auto_collect_enabled is None
            else auto_collect_enabled
        )
        self._auto_collect_interval = _validate_interval(
            configuration.auto_collect_interval_seconds
            if auto_collect_interval_seconds is None
            else auto_collect_interval_seconds
        )
        self._lock = threading.RLock()

    @classmethod
    def start(
        cls,
        session_id: str,
        configuration: ProductionConfiguration,
        *,
        currency: CurrencyLedger | None = None,
        bus: NotificationBus | None = None,
    ) -> IdleSession:
        """Open a fresh stand using the starting values of *configuration*."""
        return cls._assemble(
            session_id,
            configuration,
            state=AccumulatorState.initial(configuration),
            rate_track=UpgradeTrack.initial(UpgradeKind.RATE, configuration),
            capacity_track=UpgradeTrack.initial(UpgradeKind.CAPACITY, configuration),
            currency=currency or Wallet(configuration.starting_balance),
            bus=bus,
        )

    @classmethod
    def restore(
        cls,
        session_id: str,
        snapshot: GameStateSnapshot,
        configuration: ProductionConfiguration,
        *,
        now: datetime | None = None,
        currency: CurrencyLedger | None = None,
        bus: NotificationBus | None = None,
    ) -> IdleSession:
        """Rebuild a stand from *snapshot* and apply offline production.

        Production while away is capped by
        ``configuration.offline_progress_limit_seconds``.
        """
        session = cls._assemble(
            session_id,
            configuration,
            state=snapshot.accumulator,
            rate_track=snapshot.rate_track,
            capacity_track=snapshot.capacity_track,
            currency=currency or Wallet(snapshot.balance),
            bus=bus,
            auto_collect_enabled=snapshot.auto_collect_enabled,
            auto_collect_interval_seconds=snapshot.auto_collect_interval_seconds,
        )
        current_time = as_utc(now or datetime.now(tz=UTC))
        away_seconds = (current_time - as_utc(snapshot.saved_at)).total_seconds()
        offline_seconds = min(
            away_seconds, configuration.offline_progress_limit_seconds
        )
        if offline_seconds > 0:
            session.tick(offline_seconds)
            logger.info(
                "Applied %.0fs of offline production to %s", offline_seconds, session_id
            )
        return session

    @classmethod
    def _assemble(
        cls,
        session_id: str,
        configuration: ProductionConfiguration,
        *,
        state: AccumulatorState,
        rate_track: UpgradeTrack,
        capacity_track: UpgradeTrack,
        currency: CurrencyLedger,
        bus: NotificationBus | None,
        auto_collect_enabled: bool | None = None,
        auto_collect_interval_seconds: float | None = None,
    ) -> IdleSession:
        return cls(
            session_id,
            configuration=configuration,
            accumulator=Accumulator(state, efficiency=configuration.efficiency),
            currency=currency,
            collector=Collector(
                currency, conversion_rate=configuration.conversion_rate
            ),
            ledger=UpgradeLedger(scaling_factor=configuration.cost_scaling_factor),
            rate_track=rate_track,
            capacity_track=capacity_track,
            bus=bus,
            auto_collect_enabled=auto_collect_enabled,
            auto_collect_interval_seconds=auto_collect_interval_seconds,
        )

    @property
    def session_id(self) -> str:
        """Identifier under which the stand is stored."""
        return self._session_id

    @property
    def configuration(self) -> ProductionConfiguration:
        """Economy values this stand runs with."""
        return self._configuration

    @property
    def bus(self) -> NotificationBus:
        """Channel receiving every notification of this stand."""
        return self._bus

    @property
    def state(self) -> AccumulatorState:
        """Current production state."""
        with self._lock:
            return self._accumulator.state

    @property
    def balance(self) -> Money:
        """Current cash balance."""
        with self._lock:
            return self._currency.balance

    @property
    def auto_collect_enabled(self) -> bool:
        """Whether the runtime collects automatically."""
        return self._auto_collect_enabled

    @property
    def auto_collect_interval_seconds(self) -> float:
        """Seconds between two automatic collections."""
        return self._auto_collect_interval

    def track(self, kind: UpgradeKind) -> UpgradeTrack:
        """Return the upgrade track for *kind*."""
        with self._lock:
            return self._tracks[kind]

    def tick(self, elapsed_seconds: Decimal | float) -> AccumulatorState:
        """Produce for *elapsed_seconds* and notify when the stock changed."""
        with self._lock:
            before = self._accumulator.state
            after = self._accumulator.advance(elapsed_seconds)
            if after != before:
                self._bus.publish(
                    ProductionUpdated(
                        current=after.current_quantity, capacity=after.capacity
                    )
                )
            return after

    def collect(self, *, automatic: bool = False) -> Money:
        """Turn the whole stock into cash and resume production."""
        with self._lock:
            credited = self._collector.collect(self._accumulator)
            state = self._accumulator.state
            self._bus.publish(Collected(amount=credited, automatic=automatic))
            self._bus.publish(
                ProductionUpdated(
                    current=state.current_quantity, capacity=state.capacity
                )
            )
            if credited.amount > 0:
                self._bus.publish(BalanceChanged(balance=self._currency.balance))
            return credited

    def purchase(self, kind: UpgradeKind) -> PurchaseResult:
        """Buy the next *kind* upgrade and apply it to the stand.

        Raises :class:`InsufficientFundsError` without changing anything when
        the wallet cannot cover the price.
        """
        with self._lock:
            result = self._ledger.purchase_from(
                self._tracks[kind],
                self._currency,
                self._configuration.increment(kind),
            )
            self._tracks[kind] = result.track
            state = self._accumulator.apply_upgrade(kind, result.applied_increment)
            if kind is UpgradeKind.RATE:
                self._bus.publish(RateUpgraded(new_rate=state.rate))
            else:
                self._bus.publish(CapacityUpgraded(new_capacity=state.capacity))
                self._bus.publish(
                    ProductionUpdated(
                        current=state.current_quantity, capacity=state.capacity
                    )
                )
            self._bus.publish(BalanceChanged(balance=result.balance))
            return result

    def upgrade_cost(self, kind: UpgradeKind, levels: int = 1) -> Money:
        """Return the price of the next *levels* purchases of *kind*."""
        with self._lock:
            return self._ledger.cost_of(self._tracks[kind], levels)

    def configure_auto_collect(
        self,
        *,
        enabled: bool | None = None,
        interval_seconds: float | None = None,
    ) -> None:
        """Change the auto-collect switch and/or cadence at runtime."""
        with self._lock:
            if interval_seconds is not None:
                self._auto_collect_interval = _validate_interval(interval_seconds)
            if enabled is not None:
                self._auto_collect_enabled = enabled
            self._bus.publish(
                AutoCollectConfigured(
                    enabled=self._auto_collect_enabled,
                    interval_seconds=self._auto_collect_interval,
                )
            )

    def snapshot(self) -> GameStateSnapshot:
        """Capture a consistent, immutable copy of the stand."""
        with self._lock:
            return GameStateSnapshot(
                version=SNAPSHOT_VERSION,
                saved_at=datetime.now(tz=UTC),
                accumulator=self._accumulator.state,
                rate_track=self._tracks[UpgradeKind.RATE],
                capacity_track=self._tracks[UpgradeKind.CAPACITY],
                balance=self._currency.balance,
                auto_collect_enabled=self._auto_collect_enabled,
                auto_collect_interval_seconds=self._auto_collect_interval,
            )

    async def save(
        self, store: GameStateStore, *, timeout_seconds: float
    ) -> GameStateSnapshot:
        """Hand a snapshot to *store* without blocking the event loop.

        Raises :class:`PersistenceError` on timeout or store failure; the
        in-memory stand is left untouched either way.
        """
        snapshot = self.snapshot()
        try:
            await asyncio.wait_for(
                asyncio.to_thread(store.save_snapshot, self._session_id, snapshot),
                timeout=timeout_seconds,
            )
        except TimeoutError as exc:
            msg = f"Saving {self._session_id} timed out after {timeout_seconds}s."
            raise PersistenceError(msg) from exc
        except PersistenceError:
            raise
        except Exception as exc:
            msg = f"Saving {self._session_id} failed: {exc}"
            raise PersistenceError(msg) from exc
        logger.debug("Saved %s", self._session_id)
        return snapshot


def _validate_interval(interval_seconds: float) -> float:
    if interval_seconds <= 0:
        msg = f"Auto-collect interval must be positive, got {interval_seconds}."
        raise ConfigurationError(msg)
    return float(interval_seconds)


__all__ = ["IdleSession"]
