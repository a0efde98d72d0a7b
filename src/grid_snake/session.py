"""Single-player session owning snake, direction, food, score and phase."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

import numpy as np

from grid_snake.collision import Collision, Scoreboard, check_collision
from grid_snake.config import GameConfig
from grid_snake.direction import DirectionController
from grid_snake.food import FoodPlacer
from grid_snake.grid import Grid
from grid_snake.snake import Cell, Direction, Snake

logger = logging.getLogger(__name__)


class Phase(str, enum.Enum):
    """Lifecycle states for a session."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"
    GAME_OVER = "game_over"
    WON = "won"

    @property
    def terminal(self) -> bool:
        return self in (Phase.GAME_OVER, Phase.WON)


@dataclass(frozen=True)
class SessionState:
    """Read-only snapshot handed to presentation code."""

    body: tuple[Cell, ...]
    food: Cell | None
    score: int
    phase: Phase
    direction: Direction
    ticks: int
    rows: int
    cols: int

    @property
    def head(self) -> Cell:
        return self.body[-1]

    def to_dict(self) -> dict:
        return {
            "body": [list(seg) for seg in self.body],
            "head": list(self.head),
            "food": list(self.food) if self.food is not None else None,
            "score": self.score,
            "phase": self.phase.value,
            "direction": self.direction.name.lower(),
            "ticks": self.ticks,
            "rows": self.rows,
            "cols": self.cols,
        }


@dataclass(frozen=True)
class TickResult:
    """What a single :meth:`GameSession.tick` did."""

    moved: bool
    food_consumed: bool
    collided: bool
    state: SessionState
    board_full: bool = False
    collision: Collision | None = None

    def to_dict(self) -> dict:
        return {
            "moved": self.moved,
            "food_consumed": self.food_consumed,
            "collided": self.collided,
            "board_full": self.board_full,
            "collision": self.collision.value if self.collision else None,
            "state": self.state.to_dict(),
        }


class GameSession:
    """Owns all mutable game state and performs the tick transition.

    Nothing outside the session mutates the snake, direction, food,
    score or phase; callers read :meth:`state` snapshots. A tick either
    commits a full move or ends the game without touching the board.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.config = config if config is not None else GameConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.timing = self.config.timing
        self.scoreboard = Scoreboard(self.config.food_bonus)
        self.controller = DirectionController()
        self.reset()

    # -- read accessors ---------------------------------------------------

    @property
    def body(self) -> tuple[Cell, ...]:
        return self.snake.body

    @property
    def head(self) -> Cell:
        return self.snake.head

    @property
    def score(self) -> int:
        return self.scoreboard.score

    @property
    def direction(self) -> Direction:
        return self.controller.current

    def state(self) -> SessionState:
        """Return a snapshot of the current session state."""
        return SessionState(
            body=self.snake.body,
            food=self.food,
            score=self.scoreboard.score,
            phase=self.phase,
            direction=self.controller.current,
            ticks=self.ticks,
            rows=self.grid.rows,
            cols=self.grid.cols,
        )

    def render(self) -> np.ndarray:
        """Per-cell view model; see :meth:`Grid.render`."""
        return self.grid.render(self.snake.body, self.food)

    def to_dict(self) -> dict:
        return self.state().to_dict()

    # -- lifecycle --------------------------------------------------------

    def reset(
        self,
        rows: int | None = None,
        cols: int | None = None,
        initial_length: int | None = None,
    ) -> SessionState:
        """Reinitialise snake, direction, score and food; phase becomes IDLE.

        Optional arguments replace the configured geometry for this and
        later resets.
        """
        overrides = {
            name: value
            for name, value in (
                ("rows", rows), ("cols", cols), ("initial_length", initial_length),
            )
            if value is not None
        }
        if overrides:
            self.config = self.config.replace(**overrides)

        self.grid = Grid(self.config.rows, self.config.cols)
        self.snake = Snake(self.grid, self.config.initial_length)
        self.placer = FoodPlacer(
            self.grid, rng=self.rng, max_attempts=self.config.max_placement_attempts,
        )
        self.controller.reset()
        self.scoreboard.reset()
        self.ticks = 0
        self.phase = Phase.IDLE
        self.food = self.placer.place(self.snake.occupied)
        logger.info(
            "Session reset: %dx%d grid, snake length %d.",
            self.grid.rows, self.grid.cols, len(self.snake),
        )
        return self.state()

    def set_direction(self, direction: Direction) -> bool:
        """Request a new direction; reversals are ignored."""
        return self.controller.set_direction(direction)

    def start(self) -> bool:
        """Enter RUNNING, resetting first if the last game ended.

        Returns ``False`` if the session was already running.
        """
        if self.phase is Phase.RUNNING:
            return False
        if self.phase.terminal:
            self.reset()
        self.phase = Phase.RUNNING
        logger.info("Session started with score %d.", self.scoreboard.score)
        return True

    def stop(self) -> bool:
        """Pause a running session. Returns ``False`` if it was not running."""
        if self.phase is not Phase.RUNNING:
            return False
        self.phase = Phase.STOPPED
        self.ticks = 0
        logger.info("Session stopped with score %d.", self.scoreboard.score)
        return True

    # -- simulation -------------------------------------------------------

    def tick(self) -> TickResult:
        """Advance the game by one tick.

        Does nothing unless the session is RUNNING.
        """
        if self.phase is not Phase.RUNNING:
            return TickResult(
                moved=False, food_consumed=False, collided=False, state=self.state(),
            )

        direction = self.controller.current
        consumed = self.snake.consumes(self.food, direction, self.timing)
        candidate = self.snake.next_head(direction)

        collision = check_collision(
            self.grid, candidate, self.snake.occupied_after_shift(grow=consumed),
        )
        if collision is not None:
            self.phase = Phase.GAME_OVER
            logger.info(
                "Snake hit %s at %s after %d ticks with score %d.",
                collision.value, candidate, self.ticks, self.scoreboard.score,
            )
            return TickResult(
                moved=False,
                food_consumed=False,
                collided=True,
                state=self.state(),
                collision=collision,
            )

        self.snake.advance(direction, grow=consumed)
        self.ticks += 1

        board_full = False
        if consumed:
            self.scoreboard.award()
            self.food = self.placer.place(self.snake.occupied)
            logger.debug(
                "Food eaten; score %d, length %d, next food %s.",
                self.scoreboard.score, len(self.snake), self.food,
            )
            if self.food is None:
                board_full = True
                self.phase = Phase.WON
                logger.info(
                    "Board full after %d ticks with score %d.",
                    self.ticks, self.scoreboard.score,
                )

        return TickResult(
            moved=True,
            food_consumed=consumed,
            collided=False,
            state=self.state(),
            board_full=board_full,
        )
