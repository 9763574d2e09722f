"""Hot dog stand backend: idle game rules, persistence and API."""

from hotdog_backend.log_config import configure_logging
from hotdog_backend.main import run_dev, run_prod
from hotdog_backend.settings import BackendSettings, get_settings

main = run_dev

__all__ = [
    "BackendSettings",
    "configure_logging",
    "get_settings",
    "main",
    "run_dev",
    "run_prod",
]
