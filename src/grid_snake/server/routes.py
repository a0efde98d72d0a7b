"""REST API route handlers for session lifecycle management."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from grid_snake.config import GameConfig
from grid_snake.server.models import (
    CreateSessionRequest,
    DirectionRequest,
    DirectionResponse,
    ResetRequest,
    SessionSummary,
)
from grid_snake.server.session_manager import SessionInstance, SessionManager
from grid_snake.snake import Direction

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _get_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def _get_instance(request: Request, session_id: str) -> SessionInstance:
    try:
        return _get_manager(request).get_session(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.post("", status_code=201)
async def create_session(
    body: CreateSessionRequest, request: Request,
) -> SessionSummary:
    """Create a new idle session."""
    manager = _get_manager(request)
    try:
        config = GameConfig(
            rows=body.rows,
            cols=body.cols,
            initial_length=body.initial_length,
            tick_interval_ms=body.tick_rate_ms,
            food_bonus=body.food_bonus,
            consumption_timing=body.consumption_timing,
            seed=body.seed,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    try:
        instance = await manager.create_session(config)
    except ValueError as exc:
        raise HTTPException(status_code=429, detail=str(exc)) from exc
    return instance.summary()


@router.get("")
async def list_sessions(request: Request) -> list[SessionSummary]:
    """List hosted sessions."""
    return _get_manager(request).list_sessions()


@router.get("/{session_id}")
async def get_session(session_id: str, request: Request) -> dict:
    """Get the session summary and full state snapshot."""
    instance = _get_instance(request, session_id)
    result = instance.summary().model_dump(mode="json")
    result["state"] = instance.session.to_dict()
    return result


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str, request: Request) -> None:
    """Stop and forget a session."""
    try:
        await _get_manager(request).remove_session(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.post("/{session_id}/start")
async def start_session(session_id: str, request: Request) -> dict:
    """Start or resume the tick loop."""
    instance = _get_instance(request, session_id)
    async with instance.lock:
        if not instance.loop.start():
            raise HTTPException(status_code=409, detail="Session is already running.")
    return {"status": "started", "state": instance.session.to_dict()}


@router.post("/{session_id}/stop")
async def stop_session(session_id: str, request: Request) -> dict:
    """Pause the tick loop."""
    instance = _get_instance(request, session_id)
    async with instance.lock:
        if not instance.loop.stop():
            raise HTTPException(status_code=409, detail="Session is not running.")
    return {"status": "stopped", "state": instance.session.to_dict()}


@router.post("/{session_id}/reset")
async def reset_session(
    session_id: str, request: Request, body: ResetRequest | None = None,
) -> dict:
    """Reset to a fresh idle game without starting it."""
    instance = _get_instance(request, session_id)
    body = body if body is not None else ResetRequest()
    async with instance.lock:
        try:
            state = instance.loop.reset(body.rows, body.cols, body.initial_length)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
    return {"status": "reset", "state": state.to_dict()}


@router.post("/{session_id}/direction")
async def set_direction(
    session_id: str, body: DirectionRequest, request: Request,
) -> DirectionResponse:
    """Request a direction change; reversals are reported as not accepted."""
    instance = _get_instance(request, session_id)
    try:
        direction = Direction.parse(body.direction)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    async with instance.lock:
        accepted = instance.loop.set_direction(direction)
    return DirectionResponse(
        direction=instance.session.direction.name.lower(), accepted=accepted,
    )
