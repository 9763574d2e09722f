"""Conversion of stocked hot dogs into cash, manual or on a timer."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from hotdog_backend.game_logic.accumulator import Accumulator
    from hotdog_backend.game_logic.currency import CurrencyLedger
else:  # pragma: no cover - runtime fallback
    AsyncIterator = Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from hotdog_backend.game_logic.errors import ConfigurationError
from hotdog_backend.game_logic.state import AccumulatorState, as_decimal
from hotdog_backend.shared.value_objects import Money

logger = logging.getLogger(__name__)


class CollectionResult(BaseModel):
    """Cash produced by a collection and the drained stand state."""

    model_config = ConfigDict(frozen=True)

    credited: Money
    state: AccumulatorState


def collect(
    state: AccumulatorState,
    conversion_rate: Decimal | float,
    *,
    currency: str = "USD",
) -> CollectionResult:
    """Convert the whole stock of *state* into cash at *conversion_rate*.

    Collecting an empty stand is valid and credits zero.
    """
    rate = as_decimal(conversion_rate)
    if rate < 0:
        msg = f"Conversion rate must be non-negative, got {rate}."
        raise ConfigurationError(msg)
    credited = Money(amount=state.current_quantity * rate, currency=currency)
    return CollectionResult(credited=credited, state=state.drained())


class Collector:
    """Drain an :class:`Accumulator` into a :class:`CurrencyLedger`."""

    def __init__(
        self, currency: CurrencyLedger, *, conversion_rate: Decimal | float
    ) -> None:
        rate = as_decimal(conversion_rate)
        if rate < 0:
            msg = f"Conversion rate must be non-negative, got {rate}."
            raise ConfigurationError(msg)
        self._currency = currency
        self._conversion_rate = rate

    @property
    def conversion_rate(self) -> Decimal:
        """Cash credited per collected hot dog."""
        return self._conversion_rate

    def collect(self, accumulator: Accumulator) -> Money:
        """Credit the accumulator's stock and reset it; return the credited cash."""
        result = collect(
            accumulator.state,
            self._conversion_rate,
            currency=self._currency.balance.currency,
        )
        accumulator.replace(result.state)
        self._currency.credit(result.credited)
        return result.credited


class AutoCollectTick(BaseModel):
    """Single firing of the auto-collect timer."""

    sequence: int = Field(..., ge=1)
    interval_seconds: float
    fired_at: datetime


class AutoCollectTimer:
    """Asynchronous fixed-interval trigger whose interval can change at runtime."""

    def __init__(self, *, interval_seconds: float) -> None:
        self._interval = self._validate_interval(interval_seconds)
        self._wakeup: asyncio.Event | None = None
        self._cancelled = False

    @property
    def interval_seconds(self) -> float:
        """Seconds between two firings."""
        return self._interval

    def reconfigure(self, interval_seconds: float) -> None:
        """Change the interval; a pending wait restarts with the new value."""
        self._interval = self._validate_interval(interval_seconds)
        if self._wakeup is not None:
            self._wakeup.set()

    async def ticks(self) -> AsyncIterator[AutoCollectTick]:
        """Yield a tick every interval until cancelled."""
        wakeup = asyncio.Event()
        self._wakeup = wakeup
        self._cancelled = False
        sequence = 0

        try:
            while not self._cancelled:
                try:
                    await asyncio.wait_for(wakeup.wait(), timeout=self._interval)
                except TimeoutError:
                    sequence += 1
                    yield AutoCollectTick(
                        sequence=sequence,
                        interval_seconds=self._interval,
                        fired_at=datetime.now(tz=UTC),
                    )
                    continue
                wakeup.clear()
                logger.debug("Auto-collect interval now %ss", self._interval)
        finally:
            self._wakeup = None

    def cancel(self) -> None:
        """Stop the active timer, if any."""
        self._cancelled = True
        if self._wakeup is not None:
            self._wakeup.set()

    @staticmethod
    def _validate_interval(interval_seconds: float) -> float:
        if interval_seconds <= 0:
            msg = f"Auto-collect interval must be positive, got {interval_seconds}."
            raise ConfigurationError(msg)
        return float(interval_seconds)


__all__ = [
    "AutoCollectTick",
    "AutoCollectTimer",
    "CollectionResult",
    "Collector",
    "collect",
]
