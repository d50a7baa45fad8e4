"""Terminal-state checks evaluated after every tick."""

from __future__ import annotations

from snake_arena.grid import Coordinate
from snake_arena.snake import Snake


def hits_wall(head: Coordinate, arena_size: int, cell_size: int) -> bool:
    """True when *head* lies outside ``[0, arena_size - cell_size]``."""
    x, y = head
    limit = arena_size - cell_size
    return x < 0 or x > limit or y < 0 or y > limit


def hits_self(snake: Snake) -> bool:
    """True when the head shares a cell with any other segment."""
    return snake.self_collision()


def is_terminal(snake: Snake, arena_size: int, cell_size: int) -> bool:
    """Decide whether the settled post-tick state ends the game."""
    return hits_self(snake) or hits_wall(snake.head, arena_size, cell_size)
