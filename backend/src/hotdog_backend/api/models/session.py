"""Pydantic models for the stand HTTP and WebSocket contract."""

# ruff: noqa: TC001

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Annotated, Any, Literal

from pydantic import BaseModel, Field

from hotdog_backend.game_logic.configuration import StandOverrides
from hotdog_backend.game_logic.state import AccumulatorState, UpgradeTrack
from hotdog_backend.shared.events import Notification
from hotdog_backend.shared.value_objects import Money, UpgradeKind

if TYPE_CHECKING:
    from collections.abc import Iterable

    from hotdog_backend.game_logic.session import IdleSession
    from hotdog_backend.shared.events import NotificationBase


class StartSessionRequest(BaseModel):
    """Open a stand, optionally discarding any saved progress."""

    fresh: bool = False
    overrides: StandOverrides | None = None


class AdvanceRequest(BaseModel):
    """Simulate production for a number of seconds."""

    elapsed_seconds: float


class AutoCollectRequest(BaseModel):
    """Toggle or retime automatic collection."""

    enabled: bool | None = None
    interval_seconds: float | None = Field(default=None, gt=0)


class StandStateResponse(BaseModel):
    """Everything a client needs to render a stand."""

    session_id: str
    state: AccumulatorState
    balance: Money
    rate_track: UpgradeTrack
    capacity_track: UpgradeTrack
    affordable: dict[UpgradeKind, bool]
    conversion_rate: Decimal
    auto_collect_enabled: bool
    auto_collect_interval_seconds: float
    events: list[Notification] = Field(default_factory=list)

    @classmethod
    def from_session(
        cls,
        session: IdleSession,
        events: Iterable[NotificationBase] = (),
    ) -> StandStateResponse:
        """Describe *session* together with the notifications it just emitted."""
        balance = session.balance
        tracks = {kind: session.track(kind) for kind in UpgradeKind}
        return cls(
            session_id=session.session_id,
            state=session.state,
            balance=balance,
            rate_track=tracks[UpgradeKind.RATE],
            capacity_track=tracks[UpgradeKind.CAPACITY],
            affordable={
                kind: balance.covers(track.next_cost) for kind, track in tracks.items()
            },
            conversion_rate=session.configuration.conversion_rate,
            auto_collect_enabled=session.auto_collect_enabled,
            auto_collect_interval_seconds=session.auto_collect_interval_seconds,
            events=list(events),
        )


class CollectResponse(BaseModel):
    """Cash credited by a collection."""

    credited: Money
    stand: StandStateResponse


class PurchaseResponse(BaseModel):
    """Outcome of a successful upgrade purchase."""

    upgrade: UpgradeKind
    cost: Money
    applied_increment: Decimal
    stand: StandStateResponse


class ErrorResponse(BaseModel):
    """Machine-readable error body."""

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class CollectRequest(BaseModel):
    """Collect the stock into cash."""

    type: Literal["collect"]


class PurchaseRequest(BaseModel):
    """Buy the next level of an upgrade."""

    type: Literal["purchase"]
    upgrade: UpgradeKind


class ConfigureAutoCollectRequest(BaseModel):
    """Toggle or retime automatic collection over the socket."""

    type: Literal["configure_auto_collect"]
    enabled: bool | None = None
    interval_seconds: float | None = Field(default=None, gt=0)


class SaveRequest(BaseModel):
    """Persist the stand now."""

    type: Literal["save"]


class HeartbeatRequest(BaseModel):
    """Heartbeat message for connection keep-alive."""

    type: Literal["heartbeat"]
    nonce: str | None = None


InboundWsMessage = Annotated[
    CollectRequest
    | PurchaseRequest
    | ConfigureAutoCollectRequest
    | SaveRequest
    | HeartbeatRequest,
    Field(discriminator="type"),
]


class StandStateMessage(BaseModel):
    """Full stand description pushed on connect and after actions."""

    type: Literal["stand_state"] = "stand_state"
    stand: StandStateResponse


class NotificationMessage(BaseModel):
    """Single notification forwarded from the stand."""

    type: Literal["notification"] = "notification"
    event: Notification


class HeartbeatAckMessage(BaseModel):
    """Reply to a heartbeat."""

    type: Literal["heartbeat_ack"] = "heartbeat_ack"
    nonce: str | None = None


class ErrorMessage(BaseModel):
    """Rejected socket message."""

    type: Literal["error"] = "error"
    error: ErrorResponse


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
