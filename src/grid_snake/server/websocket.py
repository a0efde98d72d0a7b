"""WebSocket handler for real-time play."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from grid_snake.server.session_manager import SessionManager
from grid_snake.snake import Direction

logger = logging.getLogger(__name__)

ws_router = APIRouter()


def _get_manager(ws: WebSocket) -> SessionManager:
    return ws.app.state.session_manager


@ws_router.websocket("/sessions/{session_id}/play")
async def play(websocket: WebSocket, session_id: str) -> None:
    """Player WebSocket: send directions, receive state after every tick."""
    manager = _get_manager(websocket)
    try:
        instance = manager.get_session(session_id)
    except KeyError:
        await websocket.close(code=4004, reason="Session not found.")
        return

    await websocket.accept()
    instance.sockets.append(websocket)
    logger.info("Player connected to session %s.", session_id)

    # Send an initial snapshot so the client can draw before the first tick.
    await websocket.send_text(
        json.dumps(
            {"event": "snapshot", "state": instance.session.to_dict()},
            separators=(",", ":"),
        ),
    )

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if not isinstance(msg, dict):
                continue

            direction_str = msg.get("direction")
            if not isinstance(direction_str, str):
                continue
            try:
                direction = Direction.parse(direction_str)
            except ValueError:
                continue

            async with instance.lock:
                instance.loop.set_direction(direction)
    except WebSocketDisconnect:
        logger.info("Player disconnected from session %s.", session_id)
    finally:
        if websocket in instance.sockets:
            instance.sockets.remove(websocket)
