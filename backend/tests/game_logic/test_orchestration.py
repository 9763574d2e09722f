"""Tests for the session orchestrator."""

import asyncio
from decimal import Decimal

import pytest

from hotdog_backend.game_logic import (
    InMemoryGameStateStore,
    ProductionConfiguration,
    SessionNotInitializedError,
    SessionOrchestrator,
    StandOverrides,
    get_default_production_configuration,
)


def make_orchestrator() -> tuple[SessionOrchestrator, InMemoryGameStateStore]:
    base = get_default_production_configuration().model_dump()
    base["offline_progress_limit_seconds"] = 0
    configuration = ProductionConfiguration.model_validate(base)
    store = InMemoryGameStateStore()
    return SessionOrchestrator(store, configuration=configuration), store


def test_open_session_starts_then_reuses_live_stand() -> None:
    orchestrator, _ = make_orchestrator()

    first = orchestrator.open_session("stand-1")

    assert orchestrator.open_session("stand-1") is first
    assert orchestrator.session_ids == ("stand-1",)


def test_get_session_requires_an_open_stand() -> None:
    orchestrator, _ = make_orchestrator()

    with pytest.raises(SessionNotInitializedError):
        orchestrator.get_session("missing")
    with pytest.raises(SessionNotInitializedError):
        orchestrator.load_snapshot("missing")


def test_closed_stand_is_restored_from_its_save() -> None:
    orchestrator, _ = make_orchestrator()
    session = orchestrator.open_session("stand-1")
    session.tick(12)
    session.collect()
    session.tick(3)
    asyncio.run(orchestrator.save_session("stand-1"))

    orchestrator.close_session("stand-1")
    restored = orchestrator.open_session("stand-1")

    assert restored is not session
    assert restored.balance.amount == Decimal("24.00")
    assert restored.state.current_quantity == Decimal(3)
    assert orchestrator.load_snapshot("stand-1").balance == restored.balance


def test_start_session_discards_live_stand_and_applies_overrides() -> None:
    orchestrator, _ = make_orchestrator()
    orchestrator.open_session("stand-1").tick(5)

    session = orchestrator.start_session(
        "stand-1", overrides=StandOverrides(initial_capacity=7)
    )

    assert session.state.current_quantity == 0
    assert session.state.capacity == 7
    assert orchestrator.get_session("stand-1") is session
