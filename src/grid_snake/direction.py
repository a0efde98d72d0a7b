"""Directional input state machine."""

from __future__ import annotations

import logging

from grid_snake.snake import Direction

logger = logging.getLogger(__name__)


class DirectionController:
    """Holds the direction the next tick will move in.

    Requests are applied immediately and the latest one wins; nothing is
    queued between ticks. A request for the exact opposite of the
    current direction is ignored so the head cannot turn back into the
    neck.
    """

    initial = Direction.RIGHT

    def __init__(self, direction: Direction = initial) -> None:
        self.current = direction

    def set_direction(self, requested: Direction) -> bool:
        """Commit *requested* unless it reverses the current direction.

        Returns whether the change was committed.
        """
        if requested is self.current.opposite:
            logger.debug(
                "Ignored reversal %s -> %s.", self.current.name, requested.name,
            )
            return False
        self.current = requested
        return True

    def reset(self) -> None:
        self.current = self.initial
