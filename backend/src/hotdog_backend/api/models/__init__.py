"""Models used for API request and response payloads."""

from hotdog_backend.api.models.session import (
    AdvanceRequest,
    AutoCollectRequest,
    CollectRequest,
    CollectResponse,
    ConfigureAutoCollectRequest,
    ErrorMessage,
    ErrorResponse,
    HeartbeatAckMessage,
    HeartbeatRequest,
    InboundWsMessage,
    NotificationMessage,
    PurchaseRequest,
    PurchaseResponse,
    SaveRequest,
    StandStateMessage,
    StandStateResponse,
    StartSessionRequest,
)

__all__ = [
    "AdvanceRequest",
    "AutoCollectRequest",
    "CollectRequest",
    "CollectResponse",
    "ConfigureAutoCollectRequest",
    "ErrorMessage",
    "ErrorResponse",
    "HeartbeatAckMessage",
    "HeartbeatRequest",
    "InboundWsMessage",
    "NotificationMessage",
    "PurchaseRequest",
    "PurchaseResponse",
    "SaveRequest",
    "StandStateMessage",
    "StandStateResponse",
    "StartSessionRequest",
]
