"""Snake body representation and tail-follow movement."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from grid_snake.grid import Grid

Cell = tuple[int, int]


class Direction(enum.Enum):
    """Cardinal movement directions with (row_delta, col_delta) values."""

    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]

    def step(self, cell: Cell) -> Cell:
        """Return the cell one unit away from *cell* in this direction."""
        dr, dc = self.value
        return cell[0] + dr, cell[1] + dc

    @classmethod
    def parse(cls, name: str) -> Direction:
        """Resolve a direction name or key name (``"up"``, ``"ArrowUp"``, ``"w"``)."""
        direction = _NAMES.get(name.strip().lower())
        if direction is None:
            raise ValueError(f"Unknown direction: {name!r}.")
        return direction


# Pairs that would cause an instant 180° reversal.
_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

_NAMES: dict[str, Direction] = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
    "arrowup": Direction.UP,
    "arrowdown": Direction.DOWN,
    "arrowleft": Direction.LEFT,
    "arrowright": Direction.RIGHT,
    "w": Direction.UP,
    "s": Direction.DOWN,
    "a": Direction.LEFT,
    "d": Direction.RIGHT,
}


class ConsumptionTiming(enum.Enum):
    """Which head position is compared against the food cell.

    ``PRE_STEP`` compares the head before it moves, so food is eaten on
    the tick after the head reaches it. ``POST_STEP`` compares the head
    the snake is about to move to.
    """

    PRE_STEP = "pre_step"
    POST_STEP = "post_step"


@dataclass(frozen=True)
class Advance:
    """Outcome of a single :meth:`Snake.advance`."""

    new_head: Cell
    tail_before_move: Cell
    grew: bool


class Snake:
    """A snake stored as a list of cells ordered from tail to head.

    The tail is ``body[0]``; the head is ``body[-1]``. A set of grid keys
    mirrors the body for O(1) membership tests and is re-synced on every
    mutation.
    """

    def __init__(self, grid: Grid, length: int = 10) -> None:
        if length < 1:
            raise ValueError("Snake length must be at least 1.")
        if length > grid.cols:
            raise ValueError(
                f"Snake length {length} does not fit in {grid.cols} columns."
            )
        self.grid = grid
        self._body: list[Cell] = [(0, col) for col in range(length)]
        self._occupied: set[int] = set()
        self._sync()

    @classmethod
    def from_cells(cls, grid: Grid, cells: Iterable[Cell]) -> Snake:
        """Build a snake from explicit tail-to-head cells.

        Raises ``ValueError`` unless the cells are in bounds, distinct and
        orthogonally adjacent.
        """
        body = [(int(r), int(c)) for r, c in cells]
        if not body:
            raise ValueError("Snake length must be at least 1.")
        if len(set(body)) != len(body):
            raise ValueError("Snake body contains duplicate cells.")
        for seg in body:
            if not grid.in_bounds(seg):
                raise ValueError(f"Snake segment {seg} is out of bounds.")
        for (r1, c1), (r2, c2) in zip(body, body[1:]):
            if abs(r1 - r2) + abs(c1 - c2) != 1:
                raise ValueError(
                    f"Snake segments {(r1, c1)} and {(r2, c2)} are not adjacent."
                )
        snake = cls.__new__(cls)
        snake.grid = grid
        snake._body = body
        snake._occupied = set()
        snake._sync()
        return snake

    def __len__(self) -> int:
        return len(self._body)

    @property
    def head(self) -> Cell:
        return self._body[-1]

    @property
    def tail(self) -> Cell:
        return self._body[0]

    @property
    def body(self) -> tuple[Cell, ...]:
        """Tail-to-head copy of the body."""
        return tuple(self._body)

    @property
    def occupied(self) -> frozenset[int]:
        """Grid keys of every body cell."""
        return frozenset(self._occupied)

    def occupies(self, cell: Cell) -> bool:
        return self.grid.in_bounds(cell) and self.grid.key(cell) in self._occupied

    def next_head(self, direction: Direction) -> Cell:
        """Compute the next head position without moving."""
        return direction.step(self.head)

    def consumes(
        self,
        food: Cell | None,
        direction: Direction,
        timing: ConsumptionTiming = ConsumptionTiming.PRE_STEP,
    ) -> bool:
        """Check whether moving in *direction* eats *food*."""
        if food is None:
            return False
        if timing is ConsumptionTiming.PRE_STEP:
            return self.head == food
        return self.next_head(direction) == food

    def occupied_after_shift(self, grow: bool = False) -> frozenset[int]:
        """Keys covered once the body has shifted but before the new head lands.

        Every segment takes the place of the one ahead of it, so the old
        tail is vacated unless the snake grows and re-inserts it.
        """
        keys = set(self._occupied)
        if not grow:
            keys.discard(self.grid.key(self.tail))
        return frozenset(keys)

    def advance(self, direction: Direction, grow: bool = False) -> Advance:
        """Move the snake one step forward.

        Each segment follows the one ahead of it, the head moves one unit
        in *direction*, and when *grow* is set the old tail is put back at
        the tail end so the body gains one cell.
        """
        tail = self.tail
        new_head = self.next_head(direction)
        shifted = self._body[1:]
        shifted.append(new_head)
        if grow:
            shifted.insert(0, tail)
        self._body = shifted
        self._sync()
        return Advance(new_head=new_head, tail_before_move=tail, grew=grow)

    def _sync(self) -> None:
        self._occupied = {self.grid.key(seg) for seg in self._body}

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "body": [list(seg) for seg in self._body],
            "head": list(self.head),
            "length": len(self._body),
        }
