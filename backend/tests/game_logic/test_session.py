"""Tests for the stand session core."""

from __future__ import annotations

import asyncio
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from decimal import Decimal

import pytest

from hotdog_backend.game_logic import (
    ConfigurationError,
    GameStateSnapshot,
    IdleSession,
    InMemoryGameStateStore,
    InsufficientFundsError,
    NotificationRecorder,
    PersistenceError,
    ProductionConfiguration,
    get_default_production_configuration,
)
from hotdog_backend.shared import (
    AutoCollectConfigured,
    BalanceChanged,
    CapacityUpgraded,
    Collected,
    Money,
    ProductionUpdated,
    RateUpgraded,
    UpgradeKind,
)


def make_configuration(**overrides: object) -> ProductionConfiguration:
    """Build a configuration from the defaults with *overrides* applied."""
    base = get_default_production_configuration().model_dump()
    base.update(overrides)
    return ProductionConfiguration.model_validate(base)


def start_session(**overrides: object) -> tuple[IdleSession, NotificationRecorder]:
    session = IdleSession.start("stand-1", make_configuration(**overrides))
    recorder = NotificationRecorder()
    session.bus.subscribe(recorder)
    return session, recorder


def event_types(recorder: NotificationRecorder) -> list[type]:
    return [type(event) for event in recorder.drain()]


class SlowStore(InMemoryGameStateStore):
    def save_snapshot(self, session_id: str, snapshot: GameStateSnapshot) -> None:
        time.sleep(0.3)
        super().save_snapshot(session_id, snapshot)


class FirstWriteSlowStore(InMemoryGameStateStore):
    def __init__(self) -> None:
        super().__init__()
        self._writes = 0

    def save_snapshot(self, session_id: str, snapshot: GameStateSnapshot) -> None:
        self._writes += 1
        if self._writes == 1:
            time.sleep(0.3)
        super().save_snapshot(session_id, snapshot)


class BrokenStore(InMemoryGameStateStore):
    def save_snapshot(self, session_id: str, snapshot: GameStateSnapshot) -> None:
        msg = "disk full"
        raise OSError(msg)


def test_fresh_session_uses_configuration_start_values() -> None:
    session, _ = start_session(starting_balance=Money(amount=Decimal(7)))

    assert session.state.current_quantity == 0
    assert session.state.capacity == 100
    assert session.balance.amount == Decimal("7.00")
    assert session.track(UpgradeKind.RATE).level == 0
    assert session.auto_collect_enabled is False


def test_tick_publishes_production_only_when_stock_changes() -> None:
    session, recorder = start_session(initial_capacity=10)

    session.tick(4)
    session.tick(20)
    session.tick(5)

    events = recorder.drain()
    assert [type(event) for event in events] == [ProductionUpdated, ProductionUpdated]
    assert events[-1].current == Decimal(10)
    assert events[-1].capacity == 10


def test_collect_publishes_collection_production_and_balance() -> None:
    session, recorder = start_session()
    session.tick(20)
    recorder.drain()

    credited = session.collect()

    events = recorder.drain()
    assert [type(event) for event in events] == [
        Collected,
        ProductionUpdated,
        BalanceChanged,
    ]
    assert credited.amount == Decimal("40.00")
    assert events[0].automatic is False
    assert events[2].balance == session.balance
    assert session.state.current_quantity == 0


def test_empty_collect_skips_balance_notification() -> None:
    session, recorder = start_session()

    assert session.collect(automatic=True).amount == 0
    events = recorder.drain()
    assert [type(event) for event in events] == [Collected, ProductionUpdated]
    assert events[0].automatic is True


def test_rate_purchase_applies_increment() -> None:
    session, recorder = start_session(starting_balance=Money(amount=Decimal(10)))

    result = session.purchase(UpgradeKind.RATE)

    assert event_types(recorder) == [RateUpgraded, BalanceChanged]
    assert result.cost.amount == Decimal("10.00")
    assert session.balance.amount == Decimal("0.00")
    assert session.state.rate == Decimal("1.5")
    assert session.track(UpgradeKind.RATE).next_cost.amount == Decimal("15.00")


def test_capacity_purchase_resumes_full_stand() -> None:
    session, recorder = start_session(
        starting_balance=Money(amount=Decimal(25)), initial_capacity=10
    )
    session.tick(30)
    assert session.state.active is False
    recorder.drain()

    session.purchase(UpgradeKind.CAPACITY)

    assert event_types(recorder) == [CapacityUpgraded, ProductionUpdated, BalanceChanged]
    assert session.state.capacity == 60
    assert session.state.active is True


def test_failed_purchase_changes_nothing() -> None:
    session, recorder = start_session(starting_balance=Money(amount=Decimal(5)))

    with pytest.raises(InsufficientFundsError):
        session.purchase(UpgradeKind.RATE)

    assert recorder.drain() == ()
    assert session.balance.amount == Decimal("5.00")
    assert session.track(UpgradeKind.RATE).level == 0
    assert session.state.rate == Decimal("1.0")


def test_upgrade_cost_previews_several_levels() -> None:
    session, _ = start_session()

    assert session.upgrade_cost(UpgradeKind.CAPACITY, 2).amount == Decimal("62.50")


def test_configure_auto_collect_publishes_new_settings() -> None:
    session, recorder = start_session()

    session.configure_auto_collect(enabled=True, interval_seconds=2.5)

    (event,) = recorder.drain()
    assert isinstance(event, AutoCollectConfigured)
    assert event.enabled is True
    assert event.interval_seconds == 2.5
    with pytest.raises(ConfigurationError):
        session.configure_auto_collect(interval_seconds=0)
    assert session.auto_collect_interval_seconds == 2.5


def test_restore_applies_offline_production() -> None:
    config = make_configuration(offline_progress_limit_seconds=3600)
    session = IdleSession.start("stand-1", config)
    session.tick(10)
    snapshot = session.snapshot()

    restored = IdleSession.restore(
        "stand-1", snapshot, config, now=snapshot.saved_at + timedelta(seconds=30)
    )

    assert restored.state.current_quantity == Decimal(40)
    assert restored.balance == snapshot.balance


def test_restore_caps_offline_production() -> None:
    config = make_configuration(offline_progress_limit_seconds=5)
    snapshot = IdleSession.start("stand-1", config).snapshot()

    restored = IdleSession.restore(
        "stand-1", snapshot, config, now=snapshot.saved_at + timedelta(hours=2)
    )

    assert restored.state.current_quantity == Decimal(5)


def test_restore_ignores_clock_going_backwards() -> None:
    config = make_configuration()
    session = IdleSession.start("stand-1", config)
    session.tick(3)
    snapshot = session.snapshot()

    restored = IdleSession.restore(
        "stand-1", snapshot, config, now=snapshot.saved_at - timedelta(minutes=1)
    )

    assert restored.state.current_quantity == Decimal(3)


def test_save_hands_snapshot_to_store() -> None:
    session, _ = start_session()
    session.tick(8)
    store = InMemoryGameStateStore()

    snapshot = asyncio.run(session.save(store, timeout_seconds=1))

    loaded = store.load_snapshot("stand-1")
    assert loaded is not None
    assert loaded.accumulator.current_quantity == Decimal(8)
    assert snapshot.accumulator == session.state


def test_save_timeout_raises_persistence_error() -> None:
    session, _ = start_session()
    session.tick(8)

    with pytest.raises(PersistenceError, match="timed out"):
        asyncio.run(session.save(SlowStore(), timeout_seconds=0.05))

    assert session.state.current_quantity == Decimal(8)


def test_late_write_from_timed_out_save_keeps_newer_snapshot() -> None:
    session, _ = start_session()
    store = FirstWriteSlowStore()
    session.tick(2)

    async def scenario() -> None:
        with pytest.raises(PersistenceError, match="timed out"):
            await session.save(store, timeout_seconds=0.05)
        session.tick(5)
        await session.save(store, timeout_seconds=1)
        await asyncio.sleep(0.4)

    asyncio.run(scenario())

    loaded = store.load_snapshot("stand-1")
    assert loaded is not None
    assert loaded.accumulator.current_quantity == Decimal(7)


def test_store_failure_raises_persistence_error() -> None:
    session, _ = start_session()

    with pytest.raises(PersistenceError, match="disk full"):
        asyncio.run(session.save(BrokenStore(), timeout_seconds=1))


def test_concurrent_ticks_and_collects_keep_cash_consistent() -> None:
    session, _ = start_session(initial_capacity=50)

    def play() -> Decimal:
        credited = Decimal(0)
        for _ in range(200):
            session.tick(0.1)
            if session.state.current_quantity > 5:
                credited += session.collect().amount
        return credited

    with ThreadPoolExecutor(max_workers=4) as pool:
        totals = list(pool.map(lambda _: play(), range(4)))

    assert sum(totals) == session.balance.amount
    assert session.state.current_quantity <= session.state.capacity
