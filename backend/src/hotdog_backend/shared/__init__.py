"""Shared value objects and notification records for the backend."""

from hotdog_backend.shared.events import (
    AutoCollectConfigured,
    BalanceChanged,
    CapacityUpgraded,
    Collected,
    Notification,
    NotificationBase,
    ProductionUpdated,
    RateUpgraded,
    SaveFailed,
)
from hotdog_backend.shared.value_objects import Money, UpgradeKind, quantize_amount

__all__ = [
    "AutoCollectConfigured",
    "BalanceChanged",
    "CapacityUpgraded",
    "Collected",
    "Money",
    "Notification",
    "NotificationBase",
    "ProductionUpdated",
    "RateUpgraded",
    "SaveFailed",
    "UpgradeKind",
    "quantize_amount",
]
