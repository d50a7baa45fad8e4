"""Pydantic models for configuration and the events sent to presentation layers."""

from __future__ import annotations

import enum
import logging
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

logger = logging.getLogger(__name__)


class GameStatus(str, enum.Enum):
    """Lifecycle states for a simulation."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    OVER = "over"


def _default_snake() -> list[tuple[int, int]]:
    return [(160, 200), (140, 200), (120, 200)]


class SimulationConfig(BaseModel):
    """Arena geometry, starting layout, scoring and speed ramp."""

    model_config = ConfigDict(frozen=True)

    arena_size: int = Field(default=600, gt=0)
    cell_size: int = Field(default=20, gt=0)
    initial_snake: list[tuple[int, int]] = Field(
        default_factory=_default_snake, min_length=3,
    )
    initial_heading: Literal["up", "down", "left", "right"] = "right"
    initial_food: tuple[int, int] = (300, 200)
    score_increment: int = Field(default=10, gt=0)
    initial_interval_ms: int = Field(default=200, gt=0)
    interval_step_ms: int = Field(default=10, ge=0)
    min_interval_ms: int = Field(default=50, gt=0)
    seed: int | None = None

    @model_validator(mode="after")
    def _check_geometry(self) -> SimulationConfig:
        if self.arena_size % self.cell_size:
            raise ValueError("arena_size must be a multiple of cell_size.")
        if self.min_interval_ms > self.initial_interval_ms:
            raise ValueError("min_interval_ms cannot exceed initial_interval_ms.")
        return self

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(self.model_dump_json(indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> SimulationConfig:
        """Load config from a JSON file."""
        return cls.model_validate_json(Path(path).read_text())


class StateUpdated(BaseModel):
    """Snapshot emitted after every non-terminal tick."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["state_updated"] = "state_updated"
    tick: int = Field(ge=0)
    snake: list[tuple[int, int]]
    food: tuple[int, int]
    score: int = Field(ge=0)
    interval_ms: int = Field(gt=0)


class GameOver(BaseModel):
    """Emitted once when the simulation reaches its terminal state."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["game_over"] = "game_over"
    tick: int = Field(ge=0)
    final_score: int = Field(ge=0)
