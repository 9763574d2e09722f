"""Test configuration and fixtures for the backend test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from hotdog_backend.api.dependencies import get_game_session_service
from hotdog_backend.game_logic import get_default_production_configuration
from hotdog_backend.settings import get_settings

if TYPE_CHECKING:
    from collections.abc import Iterator


def _clear_caches() -> None:
    get_settings.cache_clear()
    get_default_production_configuration.cache_clear()
    get_game_session_service.cache_clear()


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Load settings and economy defaults fresh for every test."""
    monkeypatch.setenv("SAVE_BACKEND", "memory")
    _clear_caches()
    yield
    _clear_caches()
