"""Factory for constructing the FastAPI application."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hotdog_backend.api.dependencies import get_game_session_service
from hotdog_backend.api.routers import session_router
from hotdog_backend.settings import BackendSettings, get_settings

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    if get_game_session_service.cache_info().currsize:
        await get_game_session_service().shutdown()


def create_api(settings: BackendSettings | None = None) -> FastAPI:
    """Instantiate and configure the FastAPI application."""
    config = settings or get_settings()
    app = FastAPI(title="Hot Dog Stand API", lifespan=_lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(session_router)
    logger.debug("API created with CORS origins %s", config.cors_origins)
    return app


__all__ = ["create_api"]
