"""Headless simulation runs for smoke testing and throughput measurement."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import numpy as np

from grid_snake.config import GameConfig
from grid_snake.session import GameSession, Phase
from grid_snake.snake import Direction

logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    """Aggregate results from a batch of headless games."""

    games: int
    total_ticks: int
    total_score: int
    best_score: int
    collisions: int
    wins: int
    wall_time_seconds: float

    @property
    def ticks_per_second(self) -> float:
        if self.wall_time_seconds <= 0:
            return 0.0
        return self.total_ticks / self.wall_time_seconds

    def summary(self) -> str:
        return (
            f"Simulation: {self.games} games, {self.total_ticks} ticks in "
            f"{self.wall_time_seconds:.2f}s | best score {self.best_score}, "
            f"{self.collisions} collisions, {self.wins} wins, "
            f"{self.ticks_per_second:.1f} ticks/s"
        )


def simulate(
    config: GameConfig | None = None,
    *,
    games: int = 10,
    max_ticks: int = 1_000,
    turn_probability: float = 0.2,
    seed: int | None = 0,
) -> SimulationResult:
    """Play *games* sessions with random direction requests.

    Each tick, with probability *turn_probability*, a random direction is
    requested; reversals are rejected by the session as usual. A game
    ends on collision, a full board, or after *max_ticks* ticks.
    """
    if games < 1:
        raise ValueError("games must be at least 1.")
    if not 0.0 <= turn_probability <= 1.0:
        raise ValueError("turn_probability must be within [0, 1].")

    config = config if config is not None else GameConfig()
    rng = np.random.default_rng(seed)
    directions = list(Direction)
    session = GameSession(config, rng=rng)

    total_ticks = total_score = best_score = collisions = wins = 0
    start = time.perf_counter()
    for game in range(games):
        session.reset()
        session.start()
        ticks = 0
        while session.phase is Phase.RUNNING and ticks < max_ticks:
            if rng.random() < turn_probability:
                session.set_direction(directions[int(rng.integers(len(directions)))])
            result = session.tick()
            ticks += 1
            if result.collided:
                collisions += 1
            elif result.board_full:
                wins += 1
        total_ticks += ticks
        total_score += session.score
        best_score = max(best_score, session.score)
        logger.debug(
            "Game %d ended in phase %s after %d ticks with score %d.",
            game, session.phase.value, ticks, session.score,
        )
    elapsed = time.perf_counter() - start

    result = SimulationResult(
        games=games,
        total_ticks=total_ticks,
        total_score=total_score,
        best_score=best_score,
        collisions=collisions,
        wins=wins,
        wall_time_seconds=elapsed,
    )
    logger.info(result.summary())
    return result
