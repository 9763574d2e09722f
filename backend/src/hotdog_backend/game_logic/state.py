"""Stand state containers used by the game logic layer."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

from hotdog_backend.game_logic.errors import configuration_guard
from hotdog_backend.shared.value_objects import Money, UpgradeKind

if TYPE_CHECKING:
    from hotdog_backend.game_logic.configuration import ProductionConfiguration

_CENT = Decimal("0.01")


def as_decimal(value: Decimal | int | float | str) -> Decimal:
    """Convert *value* to :class:`Decimal` without binary float artefacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class AccumulatorState(BaseModel):
    """Stock of hot dogs waiting at the stand and the parameters producing them."""

    model_config = ConfigDict(frozen=True)

    current_quantity: Decimal = Field(default=Decimal(0), ge=0)
    capacity: int = Field(default=100, ge=0)
    rate: Decimal = Field(default=Decimal("1.0"), ge=0)
    active: bool = True

    def __init__(self, **data: Any) -> None:
        with configuration_guard("stand state"):
            super().__init__(**data)

    @model_validator(mode="after")
    def _validate_bounds(self) -> AccumulatorState:
        """Ensure the stock never exceeds the capacity ceiling."""
        if self.current_quantity > self.capacity:
            msg = (
                f"Quantity {self.current_quantity} exceeds capacity {self.capacity}."
            )
            raise ValueError(msg)
        return self

    @classmethod
    def initial(cls, configuration: ProductionConfiguration) -> AccumulatorState:
        """Return an empty, producing stand for *configuration*."""
        return cls(
            capacity=configuration.initial_capacity,
            rate=configuration.initial_rate,
        )

    @property
    def is_full(self) -> bool:
        """Whether the stock has reached the capacity ceiling."""
        return self.current_quantity >= self.capacity

    def advance(
        self,
        elapsed_seconds: Decimal | float,
        *,
        efficiency: Decimal | float = Decimal(1),
    ) -> AccumulatorState:
        """Return the state after producing for *elapsed_seconds*.

        Production stops at the capacity ceiling and the stand goes inactive
        until the stock is collected.
        """
        elapsed = as_decimal(elapsed_seconds)
        if elapsed <= 0 or not self.active:
            return self
        produced = self.rate * elapsed * as_decimal(efficiency)
        quantity = self.current_quantity + produced
        if quantity >= self.capacity:
            return self.model_copy(
                update={"current_quantity": Decimal(self.capacity), "active": False}
            )
        return self.model_copy(update={"current_quantity": quantity})

    def drained(self) -> AccumulatorState:
        """Return an empty stock with production resumed."""
        return self.model_copy(update={"current_quantity": Decimal(0), "active": True})

    def raised(self, kind: UpgradeKind, increment: Decimal) -> AccumulatorState:
        """Return the state with the *kind* parameter raised by *increment*."""
        if increment < 0:
            msg = "Upgrade increments must be non-negative."
            raise ValueError(msg)
        if kind is UpgradeKind.RATE:
            return self.model_copy(update={"rate": self.rate + increment})
        capacity = self.capacity + int(increment)
        active = self.active or self.current_quantity < capacity
        return self.model_copy(update={"capacity": capacity, "active": active})


class UpgradeTrack(BaseModel):
    """Level and price of the next purchase for one upgradeable parameter."""

    model_config = ConfigDict(frozen=True)

    kind: UpgradeKind
    level: int = Field(default=0, ge=0)
    next_cost: Money

    @model_validator(mode="after")
    def _validate_cost(self) -> UpgradeTrack:
        """Ensure upgrades are never free."""
        if self.next_cost.amount <= 0:
            msg = f"Upgrade track {self.kind} must have a positive cost."
            raise ValueError(msg)
        return self

    @classmethod
    def initial(
        cls, kind: UpgradeKind, configuration: ProductionConfiguration
    ) -> UpgradeTrack:
        """Return a level-zero track priced at the configured base cost."""
        return cls(kind=kind, level=0, next_cost=configuration.base_cost(kind))

    def advanced(self, scaling_factor: Decimal) -> UpgradeTrack:
        """Return the track after one purchase.

        The scaled cost is rounded to cents; when rounding would leave the price
        flat it rises by one cent instead.
        """
        scaled = self.next_cost.multiply(scaling_factor)
        if scaled.amount <= self.next_cost.amount:
            scaled = Money(
                amount=self.next_cost.amount + _CENT,
                currency=self.next_cost.currency,
            )
        return UpgradeTrack(kind=self.kind, level=self.level + 1, next_cost=scaled)


__all__ = [
    "AccumulatorState",
    "UpgradeTrack",
    "as_decimal",
]
