"""Pydantic models for API request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from grid_snake.session import Phase


class CreateSessionRequest(BaseModel):
    """Request body for POST /sessions."""

    rows: int = Field(default=48, ge=2, le=200)
    cols: int = Field(default=48, ge=2, le=200)
    initial_length: int = Field(default=10, ge=1)
    tick_rate_ms: int = Field(default=100, ge=10, le=2000)
    food_bonus: int = Field(default=10, ge=1)
    consumption_timing: str = "pre_step"
    seed: int | None = None


class ResetRequest(BaseModel):
    """Request body for POST /sessions/{session_id}/reset."""

    rows: int | None = Field(default=None, ge=2, le=200)
    cols: int | None = Field(default=None, ge=2, le=200)
    initial_length: int | None = Field(default=None, ge=1)


class DirectionRequest(BaseModel):
    """Request body for POST /sessions/{session_id}/direction."""

    direction: str = Field(min_length=1, max_length=16)


class SessionSummary(BaseModel):
    """Compact session info for list endpoints."""

    session_id: str
    phase: Phase
    score: int
    length: int
    rows: int
    cols: int
    tick_rate_ms: int


class DirectionResponse(BaseModel):
    direction: str
    accepted: bool
