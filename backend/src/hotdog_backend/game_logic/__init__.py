"""Core rules and mechanics that drive a hot dog stand."""

from hotdog_backend.game_logic.accumulator import Accumulator
from hotdog_backend.game_logic.collector import (
    AutoCollectTick,
    AutoCollectTimer,
    CollectionResult,
    Collector,
    collect,
)
from hotdog_backend.game_logic.configuration import (
    ProductionConfiguration,
    ProductionDefaults,
    StandOverrides,
    build_stand_configuration,
    get_default_production_configuration,
)
from hotdog_backend.game_logic.currency import CurrencyLedger, Wallet
from hotdog_backend.game_logic.errors import (
    ConfigurationError,
    IdleGameError,
    InsufficientFundsError,
    PersistenceError,
    SessionNotInitializedError,
)
from hotdog_backend.game_logic.notifications import (
    NotificationBus,
    NotificationRecorder,
)
from hotdog_backend.game_logic.orchestration import SessionOrchestrator
from hotdog_backend.game_logic.persistence import (
    SNAPSHOT_VERSION,
    GameStateSnapshot,
    GameStateStore,
    InMemoryGameStateStore,
)
from hotdog_backend.game_logic.runtime import SessionRuntime
from hotdog_backend.game_logic.session import IdleSession
from hotdog_backend.game_logic.state import AccumulatorState, UpgradeTrack
from hotdog_backend.game_logic.upgrades import PurchaseResult, UpgradeLedger

__all__ = [
    "SNAPSHOT_VERSION",
    "Accumulator",
    "AccumulatorState",
    "AutoCollectTick",
    "AutoCollectTimer",
    "CollectionResult",
    "Collector",
    "ConfigurationError",
    "CurrencyLedger",
    "GameStateSnapshot",
    "GameStateStore",
    "IdleGameError",
    "IdleSession",
    "InMemoryGameStateStore",
    "InsufficientFundsError",
    "NotificationBus",
    "NotificationRecorder",
    "PersistenceError",
    "ProductionConfiguration",
    "ProductionDefaults",
    "PurchaseResult",
    "SessionNotInitializedError",
    "SessionOrchestrator",
    "SessionRuntime",
    "StandOverrides",
    "UpgradeLedger",
    "UpgradeTrack",
    "Wallet",
    "build_stand_configuration",
    "collect",
    "get_default_production_configuration",
]
