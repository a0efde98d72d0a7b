"""Session configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, replace
from pathlib import Path

from grid_snake.snake import ConsumptionTiming

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameConfig:
    """Grid geometry, pacing and scoring for a game session.

    Supports JSON serialization for reproducibility.
    """

    # Grid
    rows: int = 48
    cols: int = 48
    initial_length: int = 10

    # Pacing
    tick_interval_ms: int = 100

    # Scoring
    food_bonus: int = 10
    consumption_timing: str = ConsumptionTiming.PRE_STEP.value

    # Food placement
    max_placement_attempts: int = 1_000
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.rows < 2 or self.cols < 2:
            raise ValueError("Grid dimensions must be at least 2×2.")
        if not 1 <= self.initial_length <= self.cols:
            raise ValueError(
                f"initial_length must be between 1 and {self.cols}."
            )
        if self.tick_interval_ms <= 0:
            raise ValueError("tick_interval_ms must be positive.")
        if self.food_bonus < 1:
            raise ValueError("food_bonus must be positive.")
        if self.max_placement_attempts < 1:
            raise ValueError("max_placement_attempts must be at least 1.")
        # Raises ValueError for unknown names.
        ConsumptionTiming(self.consumption_timing)

    @property
    def timing(self) -> ConsumptionTiming:
        return ConsumptionTiming(self.consumption_timing)

    def replace(self, **overrides) -> GameConfig:
        """Return a copy with *overrides* applied and re-validated."""
        return replace(self, **overrides)

    def to_dict(self) -> dict:
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        return cls(**raw)
