"""Grid Snake — tick-driven snake simulation engine."""

from grid_snake.collision import Collision, Scoreboard, check_collision
from grid_snake.config import GameConfig
from grid_snake.direction import DirectionController
from grid_snake.food import FoodPlacer
from grid_snake.grid import CellType, Grid
from grid_snake.loop import GameEvent, GameLoop
from grid_snake.session import GameSession, Phase, SessionState, TickResult
from grid_snake.snake import ConsumptionTiming, Direction, Snake

__all__ = [
    "CellType",
    "Collision",
    "ConsumptionTiming",
    "Direction",
    "DirectionController",
    "FoodPlacer",
    "GameConfig",
    "GameEvent",
    "GameLoop",
    "GameSession",
    "Grid",
    "Phase",
    "Scoreboard",
    "SessionState",
    "Snake",
    "TickResult",
    "check_collision",
]
