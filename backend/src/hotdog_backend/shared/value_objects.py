"""Immutable value objects shared across the domain layer."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from enum import StrEnum

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

_CURRENCY_QUANTIZE = Decimal("0.01")


def quantize_amount(value: Decimal | int | float | str) -> Decimal:
    """Round *value* half-up to the two decimal places used for money."""
    decimal_value = value if isinstance(value, Decimal) else Decimal(str(value))
    return decimal_value.quantize(_CURRENCY_QUANTIZE, rounding=ROUND_HALF_UP)


class Money(BaseModel):
    """Representation of monetary values with fixed precision."""

    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(
        ..., description="Monetary amount expressed in whole currency units."
    )
    currency: str = Field(
        default="USD", min_length=3, max_length=3, description="ISO-like currency code."
    )

    @model_validator(mode="after")
    def _normalize_amount(self) -> Money:
        """Ensure the amount is rounded to two decimal places and currency uppercase."""
        object.__setattr__(self, "amount", quantize_amount(self.amount))
        object.__setattr__(self, "currency", self.currency.upper())
        return self

    @classmethod
    def zero(cls, currency: str = "USD") -> Money:
        """Return an empty amount in *currency*."""
        return cls(amount=Decimal(0), currency=currency)

    def add(self, other: Money) -> Money:
        """Return a new instance with *other* added to this monetary value."""
        self._assert_same_currency(other)
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def subtract(self, other: Money) -> Money:
        """Return a new instance with *other* subtracted from this monetary value."""
        self._assert_same_currency(other)
        return Money(amount=self.amount - other.amount, currency=self.currency)

    def multiply(self, factor: Decimal | int) -> Money:
        """Scale the amount by *factor* while preserving rounding rules."""
        decimal_factor = factor if isinstance(factor, Decimal) else Decimal(factor)
        return Money(
            amount=quantize_amount(self.amount * decimal_factor),
            currency=self.currency,
        )

    def covers(self, other: Money) -> bool:
        """Return ``True`` when this amount is large enough to pay *other*."""
        self._assert_same_currency(other)
        return self.amount >= other.amount

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            msg = f"Currency mismatch: {self.currency} vs {other.currency}."
            raise ValueError(msg)


class UpgradeKind(StrEnum):
    """Stand parameters that can be raised through the upgrade ledger."""

    RATE = "rate"
    CAPACITY = "capacity"


__all__ = [
    "Money",
    "UpgradeKind",
    "quantize_amount",
]
