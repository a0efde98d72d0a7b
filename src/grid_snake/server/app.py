"""FastAPI application factory for hosting snake sessions."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from grid_snake.server.routes import router
from grid_snake.server.session_manager import DEFAULT_MAX_SESSIONS, SessionManager
from grid_snake.server.websocket import ws_router


def create_app(max_sessions: int = DEFAULT_MAX_SESSIONS) -> FastAPI:
    """Build the app; its session registry lives for the app's lifespan.

    *max_sessions* caps concurrently hosted sessions; stale ones are
    pruned when the cap is reached.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        manager = SessionManager(max_sessions=max_sessions)
        app.state.session_manager = manager
        try:
            yield
        finally:
            await manager.cleanup()

    app = FastAPI(
        title="Grid Snake API",
        version="0.1.0",
        description="Single-player snake sessions over REST and WebSocket.",
        lifespan=lifespan,
    )
    app.include_router(router)
    app.include_router(ws_router)
    return app
