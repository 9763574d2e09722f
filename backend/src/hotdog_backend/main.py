"""Hot dog stand API entrypoint."""

from __future__ import annotations

import uvicorn

from hotdog_backend.api import create_api
from hotdog_backend.log_config import configure_logging
from hotdog_backend.settings import get_settings

app = create_api()


def _run_uvicorn(*, reload: bool) -> None:
    """Configure logging and start uvicorn."""
    config = get_settings()
    configure_logging(config.log_level)
    uvicorn.run(
        "hotdog_backend.main:app",
        host=config.api_host,
        port=config.api_port,
        reload=reload,
        log_level=config.log_level.lower(),
    )


def run_dev() -> None:
    """Run the development server with auto-reload."""
    _run_uvicorn(reload=True)


def run_prod() -> None:
    """Run the server without auto-reload."""
    _run_uvicorn(reload=False)
