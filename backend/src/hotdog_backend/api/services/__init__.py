"""Service layer for API-specific business logic."""

from hotdog_backend.api.services.game_session import GameSessionService

__all__ = ["GameSessionService"]
