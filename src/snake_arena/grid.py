"""Arena coordinate space for the snake simulation."""

from __future__ import annotations

import enum
from collections.abc import Iterable

import numpy as np

Coordinate = tuple[int, int]


class CellType(enum.IntEnum):
    """Integer codes stored in an occupancy raster."""

    EMPTY = 0
    SNAKE = 1
    FOOD = 2


class Arena:
    """Square playing field measured in pixels.

    Coordinates are ``(x, y)`` pairs snapped to multiples of ``cell_size``
    and lie within ``[0, arena_size - cell_size]`` on both axes.
    """

    def __init__(self, arena_size: int = 600, cell_size: int = 20) -> None:
        if cell_size <= 0 or arena_size <= 0:
            raise ValueError("Arena and cell sizes must be positive.")
        if arena_size % cell_size:
            raise ValueError("Arena size must be a multiple of the cell size.")
        self.arena_size = arena_size
        self.cell_size = cell_size

    @property
    def cells_per_side(self) -> int:
        return self.arena_size // self.cell_size

    @property
    def max_coordinate(self) -> int:
        """Largest valid value on either axis."""
        return self.arena_size - self.cell_size

    def in_bounds(self, coord: Coordinate) -> bool:
        """Check whether a coordinate lies inside the arena."""
        x, y = coord
        return 0 <= x <= self.max_coordinate and 0 <= y <= self.max_coordinate

    def on_grid(self, coord: Coordinate) -> bool:
        """Check bounds and cell alignment together."""
        x, y = coord
        return (
            self.in_bounds(coord)
            and x % self.cell_size == 0
            and y % self.cell_size == 0
        )

    def all_coordinates(self) -> list[Coordinate]:
        """Return every cell coordinate in row-major order."""
        steps = range(0, self.arena_size, self.cell_size)
        return [(x, y) for y in steps for x in steps]

    def occupancy(
        self,
        snake: Iterable[Coordinate],
        food: Coordinate | None = None,
    ) -> np.ndarray:
        """Rasterize snake and food into a ``(rows, cols)`` int8 array.

        Segments outside the arena are skipped.
        """
        n = self.cells_per_side
        cells = np.zeros((n, n), dtype=np.int8)
        if food is not None and self.in_bounds(food):
            cells[food[1] // self.cell_size, food[0] // self.cell_size] = (
                CellType.FOOD
            )
        for x, y in snake:
            if self.in_bounds((x, y)):
                cells[y // self.cell_size, x // self.cell_size] = CellType.SNAKE
        return cells
