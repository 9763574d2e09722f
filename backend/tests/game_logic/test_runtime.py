"""Tests for the asyncio runtime driving a stand."""

from __future__ import annotations

import asyncio
from decimal import Decimal

import pytest

from hotdog_backend.game_logic import (
    ConfigurationError,
    GameStateSnapshot,
    IdleSession,
    InMemoryGameStateStore,
    NotificationRecorder,
    ProductionConfiguration,
    SessionRuntime,
    get_default_production_configuration,
)
from hotdog_backend.shared import Collected, NotificationBase, ProductionUpdated, SaveFailed


def make_session(**overrides: object) -> IdleSession:
    base = get_default_production_configuration().model_dump()
    base.update(overrides)
    return IdleSession.start("stand-1", ProductionConfiguration.model_validate(base))


class BrokenStore(InMemoryGameStateStore):
    def save_snapshot(self, session_id: str, snapshot: GameStateSnapshot) -> None:
        msg = "database offline"
        raise RuntimeError(msg)


def test_runtime_produces_and_forwards_notifications() -> None:
    session = make_session(initial_rate=Decimal(10))
    runtime = SessionRuntime(session, tick_interval_seconds=0.01)
    received: list[NotificationBase] = []

    async def sender(event: NotificationBase) -> None:
        received.append(event)

    async def scenario() -> None:
        runtime.add_sender(sender)
        await runtime.start()
        assert runtime.is_running
        await asyncio.sleep(0.15)
        await runtime.stop()

    asyncio.run(scenario())
    assert not runtime.is_running
    assert session.state.current_quantity > 0
    assert any(isinstance(event, ProductionUpdated) for event in received)


def test_runtime_auto_collects_when_enabled() -> None:
    session = make_session(
        initial_rate=Decimal(100),
        auto_collect_enabled=True,
        auto_collect_interval_seconds=0.03,
    )
    runtime = SessionRuntime(session, tick_interval_seconds=0.01)
    recorder = NotificationRecorder()
    session.bus.subscribe(recorder)

    async def scenario() -> None:
        await runtime.start()
        await asyncio.sleep(0.3)
        await runtime.stop()

    asyncio.run(scenario())
    collected = [event for event in recorder.events if isinstance(event, Collected)]
    assert collected
    assert all(event.automatic for event in collected)
    assert session.balance.amount > 0


def test_runtime_does_not_collect_while_disabled() -> None:
    session = make_session(auto_collect_interval_seconds=0.02)
    runtime = SessionRuntime(session, tick_interval_seconds=0.01)

    async def scenario() -> None:
        await runtime.start()
        await asyncio.sleep(0.1)
        await runtime.stop()

    asyncio.run(scenario())
    assert session.balance.amount == 0


def test_session_reconfiguration_retimes_running_timer() -> None:
    session = make_session(auto_collect_interval_seconds=60)
    runtime = SessionRuntime(session, tick_interval_seconds=1)

    async def scenario() -> float:
        await runtime.start()
        session.configure_auto_collect(enabled=True, interval_seconds=0.5)
        await asyncio.sleep(0.01)
        interval = runtime.auto_collect_interval_seconds
        await runtime.stop()
        return interval

    assert asyncio.run(scenario()) == 0.5


def test_failed_save_is_reported_not_raised() -> None:
    session = make_session()
    runtime = SessionRuntime(session, store=BrokenStore())
    recorder = NotificationRecorder()
    session.bus.subscribe(recorder)

    assert asyncio.run(runtime.save()) is False
    (event,) = recorder.events
    assert isinstance(event, SaveFailed)
    assert "database offline" in event.reason


def test_autosave_writes_snapshots() -> None:
    session = make_session()
    store = InMemoryGameStateStore()
    runtime = SessionRuntime(
        session,
        store=store,
        tick_interval_seconds=0.01,
        autosave_interval_seconds=0.03,
    )

    async def scenario() -> None:
        await runtime.start()
        await asyncio.sleep(0.2)
        await runtime.stop()

    asyncio.run(scenario())
    snapshot = store.load_snapshot("stand-1")
    assert snapshot is not None
    assert snapshot.accumulator.current_quantity > 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"tick_interval_seconds": 0},
        {"autosave_interval_seconds": -1, "store": InMemoryGameStateStore()},
        {"autosave_interval_seconds": 5},
    ],
)
def test_invalid_runtime_settings_are_rejected(kwargs: dict[str, object]) -> None:
    with pytest.raises(ConfigurationError):
        SessionRuntime(make_session(), **kwargs)


def test_save_without_store_is_a_configuration_error() -> None:
    runtime = SessionRuntime(make_session())

    with pytest.raises(ConfigurationError):
        asyncio.run(runtime.save())


def test_failing_sender_is_dropped_without_stopping_dispatch() -> None:
    session = make_session(initial_rate=Decimal(10))
    runtime = SessionRuntime(session, tick_interval_seconds=0.01)
    received: list[NotificationBase] = []

    async def closed_socket(event: NotificationBase) -> None:
        msg = "socket closed"
        raise RuntimeError(msg)

    async def sender(event: NotificationBase) -> None:
        received.append(event)

    async def scenario() -> int:
        runtime.add_sender(closed_socket)
        runtime.add_sender(sender)
        await runtime.start()
        await asyncio.sleep(0.05)
        seen = len(received)
        await asyncio.sleep(0.1)
        await runtime.stop()
        return seen

    seen_early = asyncio.run(scenario())
    assert seen_early > 0
    assert len(received) > seen_early


def test_rebind_moves_running_loops_to_new_session() -> None:
    old = make_session(initial_rate=Decimal(10))
    new = IdleSession.start("stand-1", get_default_production_configuration())
    runtime = SessionRuntime(old, tick_interval_seconds=0.01)

    async def scenario() -> Decimal:
        await runtime.start()
        await asyncio.sleep(0.05)
        await runtime.rebind(new)
        frozen = old.state.current_quantity
        await asyncio.sleep(0.1)
        assert runtime.is_running
        await runtime.stop()
        return frozen

    frozen = asyncio.run(scenario())
    assert runtime.session is new
    assert old.state.current_quantity == frozen
    assert new.state.current_quantity > 0
