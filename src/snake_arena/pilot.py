"""Automatic input source that steers toward food while avoiding obstacles."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from snake_arena.grid import Arena, Coordinate
from snake_arena.models import StateUpdated
from snake_arena.snake import Heading, is_reversal

if TYPE_CHECKING:
    from snake_arena.engine import Event, Simulation


class SafePilot:
    """Greedy pilot: shortest Manhattan step to the food among safe moves.

    A move is safe when it stays in the arena and does not land on the body.
    The tail counts as free unless the move eats food, since the tail only
    stays put on a growth tick. Ties are broken with the RNG.
    """

    def __init__(
        self,
        arena: Arena,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.arena = arena
        self.rng = rng if rng is not None else np.random.default_rng()

    def choose(
        self,
        snake: list[Coordinate],
        heading: Heading,
        food: Coordinate,
    ) -> Heading:
        """Pick the next heading for a snake given as head-first segments."""
        head = snake[0]
        cell = self.arena.cell_size
        options: list[tuple[int, Heading]] = []
        for candidate in Heading:
            if is_reversal(candidate, heading):
                continue
            dx, dy = candidate.value
            nxt = (head[0] + dx * cell, head[1] + dy * cell)
            if not self.arena.in_bounds(nxt):
                continue
            blocked = snake if nxt == food else snake[:-1]
            if nxt in blocked:
                continue
            dist = abs(nxt[0] - food[0]) + abs(nxt[1] - food[1])
            options.append((dist, candidate))

        if not options:
            return heading
        best = min(dist for dist, _ in options)
        choices = [h for dist, h in options if dist == best]
        return choices[int(self.rng.integers(len(choices)))]

    def steer(self, simulation: Simulation) -> None:
        """Submit a heading for the simulation's next tick."""
        state = simulation.state
        simulation.set_heading(
            self.choose(state.snake.segments(), state.heading, state.food),
        )

    def attach(self, simulation: Simulation) -> None:
        """Steer after every tick until the simulation ends."""

        def on_event(event: Event) -> None:
            if isinstance(event, StateUpdated):
                self.steer(simulation)

        simulation.subscribe(on_event)
