"""Bounded production of hot dogs over elapsed time."""

from __future__ import annotations

import logging
from decimal import Decimal

from hotdog_backend.game_logic.errors import ConfigurationError
from hotdog_backend.game_logic.state import AccumulatorState, as_decimal
from hotdog_backend.shared.value_objects import UpgradeKind

logger = logging.getLogger(__name__)


class Accumulator:
    """Hold the current :class:`AccumulatorState` and advance it tick by tick."""

    def __init__(
        self,
        state: AccumulatorState | None = None,
        *,
        efficiency: Decimal | float = Decimal(1),
    ) -> None:
        state = state or AccumulatorState()
        efficiency = as_decimal(efficiency)
        if efficiency < 0:
            msg = f"Efficiency must be non-negative, got {efficiency}."
            raise ConfigurationError(msg)
        self._state = state
        self._efficiency = efficiency

    @classmethod
    def create(
        cls,
        *,
        capacity: int,
        rate: Decimal | float,
        efficiency: Decimal | float = Decimal(1),
        current_quantity: Decimal | float = Decimal(0),
    ) -> Accumulator:
        """Build an accumulator from raw parameters, rejecting invalid values."""
        rate = as_decimal(rate)
        quantity = as_decimal(current_quantity)
        if capacity < 0:
            msg = f"Capacity must be non-negative, got {capacity}."
            raise ConfigurationError(msg)
        if rate < 0:
            msg = f"Production rate must be non-negative, got {rate}."
            raise ConfigurationError(msg)
        if quantity < 0 or quantity > capacity:
            msg = f"Initial quantity {quantity} is outside [0, {capacity}]."
            raise ConfigurationError(msg)
        state = AccumulatorState(
            current_quantity=quantity,
            capacity=capacity,
            rate=rate,
            active=quantity < capacity,
        )
        return cls(state, efficiency=efficiency)

    @property
    def state(self) -> AccumulatorState:
        """Return the current immutable state."""
        return self._state

    @property
    def efficiency(self) -> Decimal:
        """Multiplier applied to the production rate."""
        return self._efficiency

    def advance(self, elapsed_seconds: Decimal | float) -> AccumulatorState:
        """Produce for *elapsed_seconds* and return the updated state."""
        previous = self._state
        self._state = previous.advance(elapsed_seconds, efficiency=self._efficiency)
        if previous.active and not self._state.active:
            logger.debug("Stand reached capacity %s", self._state.capacity)
        return self._state

    def replace(self, state: AccumulatorState) -> None:
        """Swap in *state*, e.g. after a collection or a restore."""
        self._state = state

    def apply_upgrade(
        self, kind: UpgradeKind, increment: Decimal | float
    ) -> AccumulatorState:
        """Raise the rate or capacity by *increment* and return the new state."""
        self._state = self._state.raised(kind, as_decimal(increment))
        return self._state


__all__ = ["Accumulator"]
