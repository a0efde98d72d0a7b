"""Food placement logic."""

from __future__ import annotations

import logging
from collections.abc import Collection
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from grid_snake.grid import Grid
    from grid_snake.snake import Cell

logger = logging.getLogger(__name__)


class FoodPlacer:
    """Places food on a random cell not covered by the snake.

    Placement resamples uniform random cells until one is free. After
    ``max_attempts`` misses it switches to a uniform pick among the
    enumerated free cells, so a nearly full board still terminates.
    Uses a seeded NumPy RNG for reproducible placement.
    """

    def __init__(
        self,
        grid: Grid,
        rng: np.random.Generator | None = None,
        max_attempts: int = 1000,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")
        self.grid = grid
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_attempts = max_attempts

    def place(self, occupied: Collection[int]) -> Cell | None:
        """Return a free cell, or ``None`` if *occupied* covers the grid."""
        if len(occupied) >= self.grid.size:
            logger.warning("No free cells available for food placement.")
            return None

        for _ in range(self.max_attempts):
            cell = self.grid.random_cell(self.rng)
            if self.grid.key(cell) not in occupied:
                return cell

        free = self.grid.free_cells(occupied)
        logger.debug(
            "Rejection sampling missed %d times; choosing among %d free cells.",
            self.max_attempts, len(free),
        )
        if not free:
            return None
        return free[int(self.rng.integers(len(free)))]
