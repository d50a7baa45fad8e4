"""Snake Arena: tick-driven snake simulation core."""

from snake_arena.engine import Simulation, SimulationState
from snake_arena.food import FoodPlacer
from snake_arena.grid import Arena, CellType
from snake_arena.models import GameOver, GameStatus, SimulationConfig, StateUpdated
from snake_arena.scheduler import AsyncioScheduler, ManualScheduler, TimerHandle
from snake_arena.snake import Heading, Snake, parse_heading, request_heading

__all__ = [
    "Arena",
    "AsyncioScheduler",
    "CellType",
    "FoodPlacer",
    "GameOver",
    "GameStatus",
    "Heading",
    "ManualScheduler",
    "Simulation",
    "SimulationConfig",
    "SimulationState",
    "Snake",
    "StateUpdated",
    "TimerHandle",
    "parse_heading",
    "request_heading",
]
