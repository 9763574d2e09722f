"""Currency ledger collaborators used by the collector and upgrade ledger."""

from __future__ import annotations

from typing import Protocol

from hotdog_backend.game_logic.errors import ConfigurationError
from hotdog_backend.shared.value_objects import Money


class CurrencyLedger(Protocol):
    """Protocol describing the cash account a stand pays into and out of."""

    @property
    def balance(self) -> Money:
        """Return the current balance."""

    def credit(self, amount: Money) -> None:
        """Add *amount* to the balance."""

    def debit(self, amount: Money) -> bool:
        """Remove *amount* if affordable; return ``False`` otherwise."""


class Wallet:
    """In-memory implementation of :class:`CurrencyLedger`."""

    def __init__(self, balance: Money | None = None) -> None:
        balance = balance or Money.zero()
        if balance.amount < 0:
            msg = "Wallet balance cannot start negative."
            raise ConfigurationError(msg)
        self._balance = balance

    @property
    def balance(self) -> Money:
        """Return the current balance."""
        return self._balance

    def credit(self, amount: Money) -> None:
        """Add *amount* to the balance."""
        self._assert_non_negative(amount)
        self._balance = self._balance.add(amount)

    def debit(self, amount: Money) -> bool:
        """Remove *amount* if the balance covers it."""
        self._assert_non_negative(amount)
        if not self._balance.covers(amount):
            return False
        self._balance = self._balance.subtract(amount)
        return True

    @staticmethod
    def _assert_non_negative(amount: Money) -> None:
        if amount.amount < 0:
            msg = f"Ledger operations require non-negative amounts, got {amount.amount}."
            raise ValueError(msg)


__all__ = ["CurrencyLedger", "Wallet"]
