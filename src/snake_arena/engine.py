"""Tick-driven simulation composing snake, food, collision and timing."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from snake_arena.collision import is_terminal
from snake_arena.food import FoodPlacer
from snake_arena.grid import Arena, Coordinate
from snake_arena.models import GameOver, GameStatus, SimulationConfig, StateUpdated
from snake_arena.scheduler import ManualScheduler, Scheduler, TimerHandle
from snake_arena.snake import Heading, Snake, parse_heading, request_heading

logger = logging.getLogger(__name__)

Event = StateUpdated | GameOver
Listener = Callable[[Event], None]


@dataclass
class SimulationState:
    """Everything that changes while a simulation runs."""

    snake: Snake
    heading: Heading
    food: Coordinate
    interval_ms: int
    score: int = 0
    tick: int = 0
    status: GameStatus = GameStatus.NOT_STARTED
    pending_heading: Heading | None = None


class Simulation:
    """Single-snake simulation clocked by a repeating timer.

    The simulation owns its state and at most one timer. Each timer firing
    runs :meth:`tick`, which moves the snake, resolves food, adjusts speed
    and notifies subscribers with a :class:`StateUpdated` or, on the final
    tick, a :class:`GameOver` event.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        scheduler: Scheduler | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.config = config if config is not None else SimulationConfig()
        self.arena = Arena(self.config.arena_size, self.config.cell_size)
        self.scheduler = scheduler if scheduler is not None else ManualScheduler()
        self.food_placer = FoodPlacer(
            self.arena,
            rng=rng if rng is not None else np.random.default_rng(self.config.seed),
        )

        snake = Snake(self.config.initial_snake, cell_size=self.arena.cell_size)
        for segment in snake.body:
            if not self.arena.on_grid(segment):
                raise ValueError(f"Snake segment {segment} is off the grid.")
        food = tuple(self.config.initial_food)
        if not self.arena.on_grid(food):
            raise ValueError(f"Initial food {food} is off the grid.")
        if snake.occupies(food):
            raise ValueError("Initial food overlaps the snake.")

        self.state = SimulationState(
            snake=snake,
            heading=Heading[self.config.initial_heading.upper()],
            food=food,
            interval_ms=self.config.initial_interval_ms,
        )
        self._timer: TimerHandle | None = None
        self._listeners: list[Listener] = []
        self._outbox: deque[Event] = deque()
        self._emitting = False

    @property
    def status(self) -> GameStatus:
        return self.state.status

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def heading(self) -> Heading:
        """Heading used by the most recent tick."""
        return self.state.heading

    @property
    def timer_active(self) -> bool:
        return self._timer is not None and self._timer.active

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener* for tick events. Returns an unsubscribe hook."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def start(self) -> None:
        """Arm the clock. Has no effect unless the game has not started."""
        if self.state.status == GameStatus.RUNNING:
            return
        if self.state.status == GameStatus.OVER:
            logger.info("Ignoring start: simulation already finished.")
            return
        self.state.status = GameStatus.RUNNING
        self._arm()
        logger.info(
            "Simulation started (interval=%dms, food=%s).",
            self.state.interval_ms, self.state.food,
        )

    def set_heading(self, value: object) -> bool:
        """Queue a heading change for the next tick.

        Unknown values and 180 degree reversals of the current heading are
        ignored. The last accepted value before a tick wins. Returns whether
        the value was accepted.
        """
        heading = parse_heading(value)
        if heading is None:
            logger.debug("Ignoring invalid heading %r.", value)
            return False
        if self.state.status != GameStatus.RUNNING:
            return False
        if request_heading(heading, self.state.heading) is not heading:
            logger.debug(
                "Ignoring reversal %s while heading %s.",
                heading.name, self.state.heading.name,
            )
            return False
        self.state.pending_heading = heading
        return True

    def tick(self) -> Event | None:
        """Advance the simulation by one step.

        Returns the emitted event, or ``None`` if the simulation is not
        running.
        """
        state = self.state
        if state.status != GameStatus.RUNNING:
            return None

        if state.pending_heading is not None:
            state.heading = state.pending_heading
            state.pending_heading = None

        snake = state.snake
        snake.advance(state.heading)
        state.tick += 1

        if snake.head == state.food:
            snake.grow()
            state.score += self.config.score_increment
            state.food = self.food_placer.relocate(snake)
            if state.interval_ms > self.config.min_interval_ms:
                self._speed_up()
        else:
            snake.shrink()

        if is_terminal(snake, self.arena.arena_size, self.arena.cell_size):
            return self._finish()

        event = self.snapshot()
        try:
            self._emit(event)
        except Exception:
            logger.exception(
                "Listener failed at tick %d; ending simulation.", state.tick,
            )
            if state.status == GameStatus.RUNNING:
                self._finish()
            else:
                self._flush()
            raise
        return event

    def stop(self) -> GameOver | None:
        """End a running simulation from outside."""
        if self.state.status != GameStatus.RUNNING:
            return None
        return self._finish()

    def snapshot(self) -> StateUpdated:
        """Return the current state without advancing."""
        state = self.state
        return StateUpdated(
            tick=state.tick,
            snake=state.snake.segments(),
            food=state.food,
            score=state.score,
            interval_ms=state.interval_ms,
        )

    def _arm(self) -> None:
        """Replace any running timer with one at the current interval."""
        self._cancel_timer()
        self._timer = self.scheduler.schedule_repeating(
            self.state.interval_ms, self.tick,
        )

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _speed_up(self) -> None:
        state = self.state
        new_interval = max(
            self.config.min_interval_ms,
            state.interval_ms - self.config.interval_step_ms,
        )
        if new_interval == state.interval_ms:
            return
        self._cancel_timer()
        state.interval_ms = new_interval
        self._arm()
        logger.info("Tick interval now %dms (score %d).", new_interval, state.score)

    def _finish(self) -> GameOver:
        """Stop the clock, then mark the simulation over and notify."""
        self._cancel_timer()
        state = self.state
        state.status = GameStatus.OVER
        state.pending_heading = None
        logger.info(
            "Game over at tick %d with score %d.", state.tick, state.score,
        )
        event = GameOver(tick=state.tick, final_score=state.score)
        self._emit(event)
        return event

    def _emit(self, event: Event) -> None:
        """Deliver *event* to every listener.

        Events raised by a listener, such as the ``GameOver`` from a
        ``stop()`` call, are queued and delivered once the current event
        has reached all listeners.
        """
        self._outbox.append(event)
        self._flush()

    def _flush(self) -> None:
        if self._emitting:
            return
        self._emitting = True
        try:
            while self._outbox:
                current = self._outbox.popleft()
                for listener in list(self._listeners):
                    listener(current)
        finally:
            self._emitting = False
