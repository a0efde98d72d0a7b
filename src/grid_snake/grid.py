"""Grid bounds, cell keys, and the per-cell view model."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from grid_snake.snake import Cell


class CellType(enum.IntEnum):
    """Integer codes stored in the rendered grid array."""

    EMPTY = 0
    BODY = 1
    HEAD = 2
    FOOD = 3


class Grid:
    """Fixed-size bounded grid addressed by (row, col).

    The grid holds no mutable state; it only knows its dimensions.
    Cells are encoded as ``row * cols + col`` so they can live in plain
    integer sets.
    """

    def __init__(self, rows: int = 48, cols: int = 48) -> None:
        if rows < 2 or cols < 2:
            raise ValueError("Grid dimensions must be at least 2×2.")
        self.rows = rows
        self.cols = cols

    @property
    def size(self) -> int:
        return self.rows * self.cols

    def in_bounds(self, cell: Cell) -> bool:
        """Check whether a coordinate lies within the grid."""
        row, col = cell
        return 0 <= row < self.rows and 0 <= col < self.cols

    def key(self, cell: Cell) -> int:
        """Return the integer key of an in-bounds cell."""
        row, col = cell
        return row * self.cols + col

    def cell(self, key: int) -> Cell:
        """Inverse of :meth:`key`."""
        row, col = divmod(key, self.cols)
        return row, col

    def random_cell(self, rng: np.random.Generator) -> Cell:
        """Sample a uniformly random cell."""
        return int(rng.integers(self.rows)), int(rng.integers(self.cols))

    def free_cells(self, occupied: Iterable[int]) -> list[Cell]:
        """Return every cell whose key is not in *occupied*."""
        mask = np.ones(self.size, dtype=bool)
        keys = np.fromiter(occupied, dtype=np.int64)
        if keys.size:
            mask[keys] = False
        return [self.cell(int(k)) for k in np.flatnonzero(mask)]

    def render(self, body: Iterable[Cell], food: Cell | None) -> np.ndarray:
        """Build the (rows, cols) view model of body, head and food.

        The last cell of *body* is drawn as the head and wins over food.
        """
        cells = np.zeros((self.rows, self.cols), dtype=np.int8)
        if food is not None:
            cells[food] = CellType.FOOD
        segments = list(body)
        for seg in segments:
            cells[seg] = CellType.BODY
        if segments:
            cells[segments[-1]] = CellType.HEAD
        return cells

    def to_dict(self) -> dict:
        return {"rows": self.rows, "cols": self.cols}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return (self.rows, self.cols) == (other.rows, other.cols)

    def __hash__(self) -> int:
        return hash((self.rows, self.cols))

    def __repr__(self) -> str:
        return f"Grid(rows={self.rows}, cols={self.cols})"
