"""Exception taxonomy raised by the production core."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

from pydantic import ValidationError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from hotdog_backend.shared.value_objects import Money


class IdleGameError(Exception):
    """Base class for every error raised by the game logic layer."""


class ConfigurationError(IdleGameError, ValueError):
    """Raised when static economy parameters are invalid."""


class InsufficientFundsError(IdleGameError):
    """Raised when a purchase costs more than the available balance."""

    def __init__(self, required: Money, available: Money) -> None:
        super().__init__(
            f"Purchase requires {required.amount} {required.currency}, "
            f"only {available.amount} {available.currency} available."
        )
        self.required = required
        self.available = available


class PersistenceError(IdleGameError):
    """Raised when a snapshot cannot be saved or loaded."""


class SessionNotInitializedError(IdleGameError, LookupError):
    """Raised when an operation targets an unknown session."""


@contextmanager
def configuration_guard(subject: str = "economy configuration") -> Iterator[None]:
    """Re-raise validation failures as :class:`ConfigurationError`."""
    try:
        yield
    except ValidationError as exc:
        msg = f"Invalid {subject}: {exc}"
        raise ConfigurationError(msg) from exc


__all__ = [
    "ConfigurationError",
    "IdleGameError",
    "InsufficientFundsError",
    "PersistenceError",
    "SessionNotInitializedError",
    "configuration_guard",
]
