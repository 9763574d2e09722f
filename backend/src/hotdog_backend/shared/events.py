"""Notification records emitted by the production core."""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal  # noqa: TC003
from typing import Annotated, Literal

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from hotdog_backend.shared.value_objects import Money  # noqa: TC001


def _now() -> datetime:
    return datetime.now(tz=UTC)


class NotificationBase(BaseModel):
    """Common metadata attached to every notification."""

    model_config = ConfigDict(frozen=True)

    occurred_at: datetime = Field(default_factory=_now)


class ProductionUpdated(NotificationBase):
    """Stock level after a production tick or a collection."""

    event_type: Literal["production_updated"] = "production_updated"
    current: Decimal = Field(..., ge=0)
    capacity: int = Field(..., ge=0)


class CapacityUpgraded(NotificationBase):
    """Capacity ceiling after a successful capacity purchase."""

    event_type: Literal["capacity_upgraded"] = "capacity_upgraded"
    new_capacity: int = Field(..., ge=0)


class RateUpgraded(NotificationBase):
    """Production rate after a successful rate purchase."""

    event_type: Literal["rate_upgraded"] = "rate_upgraded"
    new_rate: Decimal = Field(..., ge=0)


class Collected(NotificationBase):
    """Cash credited by a manual or automatic collection."""

    event_type: Literal["collected"] = "collected"
    amount: Money
    automatic: bool = False


class BalanceChanged(NotificationBase):
    """Wallet balance after any credit or debit."""

    event_type: Literal["balance_changed"] = "balance_changed"
    balance: Money


class AutoCollectConfigured(NotificationBase):
    """Auto-collect cadence after a runtime reconfiguration."""

    event_type: Literal["auto_collect_configured"] = "auto_collect_configured"
    enabled: bool
    interval_seconds: float = Field(..., gt=0)


class SaveFailed(NotificationBase):
    """A save request did not reach the persistence store."""

    event_type: Literal["save_failed"] = "save_failed"
    reason: str


Notification = Annotated[
    ProductionUpdated
    | CapacityUpgraded
    | RateUpgraded
    | Collected
    | BalanceChanged
    | AutoCollectConfigured
    | SaveFailed,
    Field(discriminator="event_type"),
]


__all__ = [
    "AutoCollectConfigured",
    "BalanceChanged",
    "CapacityUpgraded",
    "Collected",
    "Notification",
    "NotificationBase",
    "ProductionUpdated",
    "RateUpgraded",
    "SaveFailed",
]
