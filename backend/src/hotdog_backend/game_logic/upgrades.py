"""Escalating-cost purchases of production rate and capacity."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING

from pydantic import BaseModel
from pydantic.config import ConfigDict

from hotdog_backend.game_logic.errors import ConfigurationError, InsufficientFundsError
from hotdog_backend.game_logic.state import UpgradeTrack, as_decimal
from hotdog_backend.shared.value_objects import Money, quantize_amount

if TYPE_CHECKING:
    from hotdog_backend.game_logic.currency import CurrencyLedger

logger = logging.getLogger(__name__)


class PurchaseResult(BaseModel):
    """Outcome of a successful upgrade purchase."""

    model_config = ConfigDict(frozen=True)

    track: UpgradeTrack
    balance: Money
    cost: Money
    applied_increment: Decimal


class UpgradeLedger:
    """Price upgrades and advance their tracks by a fixed scaling factor.

    Costs, balances and increments are rounded half-up to cents at the boundary
    of every purchase, so repeated purchases never accumulate float drift.
    """

    def __init__(self, *, scaling_factor: Decimal | float) -> None:
        factor = as_decimal(scaling_factor)
        if factor <= 1:
            msg = f"Cost scaling factor must be greater than 1, got {factor}."
            raise ConfigurationError(msg)
        self._scaling_factor = factor

    @property
    def scaling_factor(self) -> Decimal:
        """Multiplier applied to the cost after each purchase."""
        return self._scaling_factor

    def purchase(
        self,
        track: UpgradeTrack,
        balance: Money,
        increment: Decimal | float,
    ) -> PurchaseResult:
        """Buy the next level of *track* out of *balance*.

        Raises :class:`InsufficientFundsError` when *balance* is below the
        track's next cost; nothing is modified in that case.
        """
        applied = self._round_increment(increment)
        cost = track.next_cost
        if not balance.covers(cost):
            raise InsufficientFundsError(required=cost, available=balance)
        result = PurchaseResult(
            track=track.advanced(self._scaling_factor),
            balance=balance.subtract(cost),
            cost=cost,
            applied_increment=applied,
        )
        logger.info(
            "Purchased %s level %s for %s", track.kind, result.track.level, cost.amount
        )
        return result

    def purchase_from(
        self,
        track: UpgradeTrack,
        currency: CurrencyLedger,
        increment: Decimal | float,
    ) -> PurchaseResult:
        """Buy the next level of *track*, debiting *currency* directly."""
        applied = self._round_increment(increment)
        cost = track.next_cost
        available = currency.balance
        if not currency.debit(cost):
            raise InsufficientFundsError(required=cost, available=available)
        result = PurchaseResult(
            track=track.advanced(self._scaling_factor),
            balance=currency.balance,
            cost=cost,
            applied_increment=applied,
        )
        logger.info(
            "Purchased %s level %s for %s", track.kind, result.track.level, cost.amount
        )
        return result

    def cost_of(self, track: UpgradeTrack, levels: int = 1) -> Money:
        """Return the total price of the next *levels* purchases on *track*."""
        if levels < 0:
            msg = "Number of levels must be non-negative."
            raise ValueError(msg)
        total = Money.zero(track.next_cost.currency)
        for _ in range(levels):
            total = total.add(track.next_cost)
            track = track.advanced(self._scaling_factor)
        return total

    @staticmethod
    def _round_increment(increment: Decimal | float) -> Decimal:
        value = quantize_amount(as_decimal(increment))
        if value < 0:
            msg = f"Upgrade increment must be non-negative, got {value}."
            raise ValueError(msg)
        return value


__all__ = ["PurchaseResult", "UpgradeLedger"]
