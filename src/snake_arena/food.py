"""Food placement logic."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from snake_arena.grid import Arena, Coordinate
    from snake_arena.snake import Snake

logger = logging.getLogger(__name__)


class FoodPlacer:
    """Chooses food cells that are not covered by the snake.

    Each axis is drawn independently and uniformly from the arena's cells;
    a candidate on the snake is rejected and redrawn. Uses a seeded NumPy
    RNG for reproducible placement.
    """

    def __init__(
        self,
        arena: Arena,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.arena = arena
        self.rng = rng if rng is not None else np.random.default_rng()

    def draw(self) -> Coordinate:
        """Draw one grid-aligned candidate without checking the snake."""
        n = self.arena.cells_per_side
        col, row = self.rng.integers(0, n, size=2)
        return int(col) * self.arena.cell_size, int(row) * self.arena.cell_size

    def relocate(self, snake: Snake) -> Coordinate:
        """Return a new food coordinate disjoint from every snake segment.

        Redraws without limit, so the snake must never fill the arena.
        """
        occupied = set(snake.body)
        attempts = 1
        candidate = self.draw()
        while candidate in occupied:
            attempts += 1
            candidate = self.draw()
        logger.debug("Food placed at %s after %d draw(s).", candidate, attempts)
        return candidate
