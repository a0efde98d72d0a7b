"""Collision detection and score keeping."""

from __future__ import annotations

import enum
from collections.abc import Collection
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from grid_snake.grid import Grid
    from grid_snake.snake import Cell

FOOD_BONUS = 10


class Collision(enum.Enum):
    """Reason a candidate head position is fatal."""

    WALL = "wall"
    SELF = "self"


def check_collision(
    grid: Grid, candidate: Cell, occupied: Collection[int],
) -> Collision | None:
    """Classify *candidate* against the grid bounds and the body keys.

    *occupied* must describe the body as it stands after the shift and
    before the new head is appended.
    """
    if not grid.in_bounds(candidate):
        return Collision.WALL
    if grid.key(candidate) in occupied:
        return Collision.SELF
    return None


class Scoreboard:
    """Running score; each food adds a fixed bonus."""

    def __init__(self, bonus: int = FOOD_BONUS) -> None:
        if bonus < 1:
            raise ValueError("Food bonus must be positive.")
        self.bonus = bonus
        self.score = 0
        self.foods_eaten = 0

    def award(self) -> int:
        """Credit one food and return the new score."""
        self.foods_eaten += 1
        self.score += self.bonus
        return self.score

    def reset(self) -> None:
        self.score = 0
        self.foods_eaten = 0
