"""Tests for the FoodPlacer module."""

import numpy as np

from snake_arena.food import FoodPlacer
from snake_arena.grid import Arena
from snake_arena.snake import Snake


class TestFoodDraw:
    def test_draw_is_on_grid(self):
        arena = Arena()
        placer = FoodPlacer(arena, rng=np.random.default_rng(0))
        for _ in range(200):
            assert arena.on_grid(placer.draw())

    def test_deterministic_with_seed(self):
        a = FoodPlacer(Arena(), rng=np.random.default_rng(42))
        b = FoodPlacer(Arena(), rng=np.random.default_rng(42))
        assert [a.draw() for _ in range(10)] == [b.draw() for _ in range(10)]

    def test_returns_python_ints(self):
        x, y = FoodPlacer(Arena(), rng=np.random.default_rng(1)).draw()
        assert type(x) is int
        assert type(y) is int


class TestFoodRelocate:
    def test_never_on_snake(self):
        arena = Arena(arena_size=80, cell_size=20)
        # 13 of the 16 cells are covered, so most draws get rejected.
        body = [c for c in arena.all_coordinates() if c not in {(0, 0), (60, 20), (40, 60)}]
        snake = Snake(body)
        placer = FoodPlacer(arena, rng=np.random.default_rng(7))
        for _ in range(50):
            food = placer.relocate(snake)
            assert not snake.occupies(food)
            assert food in {(0, 0), (60, 20), (40, 60)}

    def test_single_free_cell(self):
        arena = Arena(arena_size=60, cell_size=20)
        body = [c for c in arena.all_coordinates() if c != (20, 20)]
        placer = FoodPlacer(arena, rng=np.random.default_rng(3))
        assert placer.relocate(Snake(body)) == (20, 20)

    def test_does_not_mutate_snake(self):
        snake = Snake([(160, 200), (140, 200), (120, 200)])
        FoodPlacer(Arena(), rng=np.random.default_rng(0)).relocate(snake)
        assert snake.segments() == [(160, 200), (140, 200), (120, 200)]
