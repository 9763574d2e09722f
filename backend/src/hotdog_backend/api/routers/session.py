"""HTTP and WebSocket endpoints for hot dog stands."""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status
from pydantic import BaseModel, TypeAdapter, ValidationError

from hotdog_backend.api.dependencies import get_game_session_service
from hotdog_backend.api.models import (
    AdvanceRequest,
    AutoCollectRequest,
    CollectResponse,
    ErrorMessage,
    ErrorResponse,
    HeartbeatAckMessage,
    InboundWsMessage,
    NotificationMessage,
    PurchaseResponse,
    StandStateMessage,
    StandStateResponse,
    StartSessionRequest,
)
from hotdog_backend.api.services import GameSessionService  # noqa: TC001
from hotdog_backend.game_logic import (
    ConfigurationError,
    InsufficientFundsError,
    PersistenceError,
    SessionNotInitializedError,
    SessionRuntime,
)
from hotdog_backend.shared import NotificationBase, UpgradeKind

logger = logging.getLogger(__name__)

router = APIRouter(tags=["session"])

ServiceDep = Annotated[GameSessionService, Depends(get_game_session_service)]

INBOUND_WS_MESSAGE_ADAPTER = TypeAdapter(InboundWsMessage)


def _error(
    status_code: int,
    code: str,
    message: str,
    detail: dict[str, Any] | None = None,
) -> HTTPException:
    body = ErrorResponse(code=code, message=message, detail=detail or {})
    return HTTPException(status_code=status_code, detail=body.model_dump(mode="json"))


def _not_found(exc: SessionNotInitializedError) -> HTTPException:
    return _error(status.HTTP_404_NOT_FOUND, "session_not_found", str(exc))


def _persistence_failed(exc: PersistenceError) -> HTTPException:
    return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "persistence_failed", str(exc))


def _insufficient_funds_body(exc: InsufficientFundsError) -> ErrorResponse:
    return ErrorResponse(
        code="insufficient_funds",
        message=str(exc),
        detail={
            "required": exc.required.model_dump(mode="json"),
            "available": exc.available.model_dump(mode="json"),
        },
    )


@router.post("/sessions/{session_id}", response_model=StandStateResponse)
async def open_stand(
    session_id: str,
    service: ServiceDep,
    payload: StartSessionRequest | None = None,
) -> StandStateResponse:
    """Start a stand or restore it from its last save."""
    request = payload or StartSessionRequest()
    try:
        session = await service.open_session(
            session_id, fresh=request.fresh, overrides=request.overrides
        )
    except PersistenceError as exc:
        raise _persistence_failed(exc) from exc
    except ConfigurationError as exc:
        raise _error(
            status.HTTP_422_UNPROCESSABLE_ENTITY, "invalid_configuration", str(exc)
        ) from exc
    return StandStateResponse.from_session(session)


@router.get("/sessions/{session_id}", response_model=StandStateResponse)
async def get_stand(session_id: str, service: ServiceDep) -> StandStateResponse:
    """Return the live state of a stand."""
    try:
        session = service.get_session(session_id)
    except SessionNotInitializedError as exc:
        raise _not_found(exc) from exc
    return StandStateResponse.from_session(session)


@router.post("/sessions/{session_id}/advance", response_model=StandStateResponse)
async def advance_stand(
    session_id: str, payload: AdvanceRequest, service: ServiceDep
) -> StandStateResponse:
    """Simulate production for the requested number of seconds."""
    try:
        events = service.advance(session_id, payload.elapsed_seconds)
        session = service.get_session(session_id)
    except SessionNotInitializedError as exc:
        raise _not_found(exc) from exc
    return StandStateResponse.from_session(session, events)


@router.post("/sessions/{session_id}/collect", response_model=CollectResponse)
async def collect_stand(session_id: str, service: ServiceDep) -> CollectResponse:
    """Turn the stand's stock into cash."""
    try:
        credited, events = service.collect(session_id)
        session = service.get_session(session_id)
    except SessionNotInitializedError as exc:
        raise _not_found(exc) from exc
    return CollectResponse(
        credited=credited, stand=StandStateResponse.from_session(session, events)
    )


@router.post("/sessions/{session_id}/upgrades/{kind}", response_model=PurchaseResponse)
async def purchase_upgrade(
    session_id: str, kind: UpgradeKind, service: ServiceDep
) -> PurchaseResponse:
    """Buy the next level of the *kind* upgrade."""
    try:
        result, events = service.purchase(session_id, kind)
        session = service.get_session(session_id)
    except SessionNotInitializedError as exc:
        raise _not_found(exc) from exc
    except InsufficientFundsError as exc:
        body = _insufficient_funds_body(exc)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=body.model_dump(mode="json")
        ) from exc
    return PurchaseResponse(
        upgrade=kind,
        cost=result.cost,
        applied_increment=result.applied_increment,
        stand=StandStateResponse.from_session(session, events),
    )


@router.put("/sessions/{session_id}/auto-collect", response_model=StandStateResponse)
async def configure_auto_collect(
    session_id: str, payload: AutoCollectRequest, service: ServiceDep
) -> StandStateResponse:
    """Toggle automatic collection or change its cadence."""
    try:
        session = service.configure_auto_collect(
            session_id,
            enabled=payload.enabled,
            interval_seconds=payload.interval_seconds,
        )
    except SessionNotInitializedError as exc:
        raise _not_found(exc) from exc
    return StandStateResponse.from_session(session)


@router.post("/sessions/{session_id}/save", response_model=dict[str, Any])
async def save_stand(session_id: str, service: ServiceDep) -> dict[str, Any]:
    """Persist the stand and return the stored snapshot."""
    try:
        snapshot = await service.save(session_id)
    except SessionNotInitializedError as exc:
        raise _not_found(exc) from exc
    except PersistenceError as exc:
        raise _persistence_failed(exc) from exc
    return snapshot.to_payload()


@router.get("/sessions/{session_id}/snapshot", response_model=dict[str, Any])
async def get_snapshot(session_id: str, service: ServiceDep) -> dict[str, Any]:
    """Return the last stored snapshot of a stand."""
    try:
        snapshot = service.load_snapshot(session_id)
    except SessionNotInitializedError as exc:
        raise _not_found(exc) from exc
    except PersistenceError as exc:
        raise _persistence_failed(exc) from exc
    return snapshot.to_payload()


async def _handle_message(
    service: GameSessionService,
    runtime: SessionRuntime,
    session_id: str,
    message: BaseModel,
) -> BaseModel:
    """Apply one inbound socket message and return the reply."""
    session = runtime.session
    match getattr(message, "type", None):
        case "collect":
            service.collect(session_id)
        case "purchase":
            try:
                service.purchase(session_id, message.upgrade)
            except InsufficientFundsError as exc:
                return ErrorMessage(error=_insufficient_funds_body(exc))
        case "configure_auto_collect":
            service.configure_auto_collect(
                session_id,
                enabled=message.enabled,
                interval_seconds=message.interval_seconds,
            )
        case "save":
            await runtime.save()
        case "heartbeat":
            return HeartbeatAckMessage(nonce=message.nonce)
        case other:
            msg = f"Unsupported message type: {other}"
            raise ValueError(msg)
    return StandStateMessage(stand=StandStateResponse.from_session(session))


@router.websocket("/ws/sessions/{session_id}")
async def stand_stream(
    websocket: WebSocket, session_id: str, service: ServiceDep
) -> None:
    """Stream live notifications of a stand and accept player actions."""
    await websocket.accept()

    async def send(model: BaseModel) -> None:
        await websocket.send_json(model.model_dump(mode="json"))

    try:
        session = await service.open_session(session_id)
    except PersistenceError as exc:
        error = ErrorResponse(code="persistence_failed", message=str(exc))
        await send(ErrorMessage(error=error))
        await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
        return

    async def forward(event: NotificationBase) -> None:
        await send(NotificationMessage(event=event))

    runtime = await service.acquire_runtime(session_id)
    runtime.add_sender(forward)
    try:
        await send(StandStateMessage(stand=StandStateResponse.from_session(session)))
        while True:
            raw = await websocket.receive_json()
            try:
                message = INBOUND_WS_MESSAGE_ADAPTER.validate_python(raw)
            except ValidationError as exc:
                error = ErrorResponse(code="invalid_message", message=str(exc))
                await send(ErrorMessage(error=error))
                continue
            await send(await _handle_message(service, runtime, session_id, message))
    except WebSocketDisconnect:
        logger.info("Client left stand %s", session_id)
    finally:
        runtime.remove_sender(forward)
        await service.release_runtime(session_id)


__all__ = ["router"]
