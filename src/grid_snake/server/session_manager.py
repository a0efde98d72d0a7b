"""In-memory session registry, lifecycle management, and state broadcasting."""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass, field

from starlette.websockets import WebSocket, WebSocketState

from grid_snake.config import GameConfig
from grid_snake.loop import EventMessage, GameLoop
from grid_snake.server.models import SessionSummary
from grid_snake.session import GameSession

logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = 100


@dataclass
class SessionInstance:
    """A hosted session, its tick driver and its connected sockets."""

    session_id: str
    loop: GameLoop
    sockets: list[WebSocket] = field(default_factory=list)
    created_at: float = field(default_factory=time.monotonic)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    @property
    def session(self) -> GameSession:
        return self.loop.session

    @property
    def stale(self) -> bool:
        """Finished, or idle/stopped with nobody connected."""
        if self.loop.running:
            return False
        return self.session.phase.terminal or not self.sockets

    def summary(self) -> SessionSummary:
        state = self.session.state()
        return SessionSummary(
            session_id=self.session_id,
            phase=state.phase,
            score=state.score,
            length=len(state.body),
            rows=state.rows,
            cols=state.cols,
            tick_rate_ms=self.loop.tick_interval_ms,
        )


class SessionManager:
    """Central registry managing all hosted sessions."""

    def __init__(self, max_sessions: int = DEFAULT_MAX_SESSIONS) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be >= 1.")
        self._sessions: dict[str, SessionInstance] = {}
        self._max_sessions = max_sessions

    async def create_session(self, config: GameConfig) -> SessionInstance:
        """Create a new idle session and return the instance.

        When the registry is full, stale sessions are pruned oldest first
        before the request is refused.
        """
        if len(self._sessions) >= self._max_sessions:
            await self._prune_stale_sessions()
        if len(self._sessions) >= self._max_sessions:
            raise ValueError("Session limit reached. Try again later.")

        session_id = uuid.uuid4().hex[:12]
        loop = GameLoop(GameSession(config))
        instance = SessionInstance(session_id=session_id, loop=loop)
        loop.subscribe(lambda message: self._broadcast(instance, message))
        self._sessions[session_id] = instance
        logger.info(
            "Session %s created (%dx%d, tick %d ms).",
            session_id, config.rows, config.cols, config.tick_interval_ms,
        )
        return instance

    def get_session(self, session_id: str) -> SessionInstance:
        """Return the session or raise ``KeyError``."""
        instance = self._sessions.get(session_id)
        if instance is None:
            raise KeyError(f"Session {session_id} not found.")
        return instance

    def list_sessions(self) -> list[SessionSummary]:
        return [s.summary() for s in self._sessions.values()]

    async def _prune_stale_sessions(self) -> None:
        """Free one slot by dropping the oldest stale session, if any."""
        stale = sorted(
            (s for s in self._sessions.values() if s.stale),
            key=lambda s: s.created_at,
        )
        overflow = len(self._sessions) - self._max_sessions + 1
        victims = stale[:overflow]
        for instance in victims:
            self._sessions.pop(instance.session_id, None)
            await instance.loop.aclose()
            await self._close_connections(instance)
        if victims:
            logger.info(
                "Pruned %d stale sessions (retaining up to %d).",
                len(victims), self._max_sessions,
            )

    async def remove_session(self, session_id: str) -> None:
        """Stop a session's driver, close its sockets and forget it."""
        instance = self._sessions.pop(session_id, None)
        if instance is None:
            raise KeyError(f"Session {session_id} not found.")
        await instance.loop.aclose()
        await self._close_connections(instance)
        logger.info("Session %s removed.", session_id)

    async def _broadcast(
        self, instance: SessionInstance, message: EventMessage,
    ) -> None:
        """Send an event and state snapshot to every connected socket."""
        payload = json.dumps(message.to_dict(), separators=(",", ":"))
        dead: list[WebSocket] = []

        # Iterate over a snapshot so disconnect handlers can mutate the
        # live socket list without affecting this send loop.
        for ws in list(instance.sockets):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.send_text(payload)
            except Exception:
                dead.append(ws)

        for ws in dead:
            if ws in instance.sockets:
                instance.sockets.remove(ws)

    async def _close_connections(self, instance: SessionInstance) -> None:
        for ws in list(instance.sockets):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.close(code=1000, reason="Session closed.")
            except Exception:
                logger.warning(
                    "Failed closing socket in session %s.", instance.session_id,
                )
        instance.sockets.clear()

    async def cleanup(self) -> None:
        """Cancel all running tick loops and close every socket."""
        instances = list(self._sessions.values())
        for instance in instances:
            await instance.loop.aclose()
            await self._close_connections(instance)
        self._sessions.clear()
        logger.info("SessionManager cleanup complete.")
