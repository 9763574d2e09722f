"""Tests for the service that owns live stands and their runtimes."""

from __future__ import annotations

import asyncio

from hotdog_backend.api.services import GameSessionService
from hotdog_backend.settings import BackendSettings


def make_service() -> GameSessionService:
    return GameSessionService.create_default(
        BackendSettings(
            save_backend="memory",
            tick_interval_seconds=0.01,
            autosave_interval_seconds=None,
        )
    )


def test_fresh_start_moves_running_runtime_to_new_stand() -> None:
    service = make_service()

    async def scenario() -> None:
        old = await service.open_session("stand-1")
        runtime = await service.acquire_runtime("stand-1")
        await asyncio.sleep(0.05)

        new = await service.open_session("stand-1", fresh=True)
        old_quantity = old.state.current_quantity
        await asyncio.sleep(0.05)

        assert runtime.session is new
        assert service.get_session("stand-1") is new
        assert old.state.current_quantity == old_quantity
        assert new.state.current_quantity > 0

        await service.release_runtime("stand-1")
        stored = service.load_snapshot("stand-1")
        assert stored.accumulator.model_dump() == new.state.model_dump()

    asyncio.run(scenario())


def test_restore_without_fresh_keeps_live_stand() -> None:
    service = make_service()

    async def scenario() -> None:
        first = await service.open_session("stand-1")
        assert await service.open_session("stand-1") is first

    asyncio.run(scenario())
