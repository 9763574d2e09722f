"""Dependency providers for FastAPI routers."""

from __future__ import annotations

from functools import cache

from hotdog_backend.api.services import GameSessionService
from hotdog_backend.settings import get_settings


@cache
def get_game_session_service() -> GameSessionService:
    """Return the shared :class:`GameSessionService` instance."""

    return GameSessionService.create_default(get_settings())


__all__ = ["get_game_session_service"]
