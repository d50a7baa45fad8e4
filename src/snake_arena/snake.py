"""Snake body, headings, and direction validation."""

from __future__ import annotations

import enum
from collections import deque
from collections.abc import Iterable

from snake_arena.grid import Coordinate

MIN_LENGTH = 3


class Heading(enum.Enum):
    """Cardinal directions as ``(dx, dy)`` unit deltas in screen space."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)


# Browser key names accepted alongside the plain heading names.
_KEY_NAMES: dict[str, Heading] = {
    "arrowup": Heading.UP,
    "arrowdown": Heading.DOWN,
    "arrowleft": Heading.LEFT,
    "arrowright": Heading.RIGHT,
}


def parse_heading(value: object) -> Heading | None:
    """Map external directional input onto a :class:`Heading`.

    Returns ``None`` for anything that is not one of the four headings.
    """
    if isinstance(value, Heading):
        return value
    if not isinstance(value, str):
        return None
    key = value.strip().lower()
    if key in _KEY_NAMES:
        return _KEY_NAMES[key]
    try:
        return Heading[key.upper()]
    except KeyError:
        return None


def is_reversal(candidate: Heading, current: Heading) -> bool:
    """True when *candidate* points exactly opposite to *current*."""
    cdx, cdy = candidate.value
    dx, dy = current.value
    return cdx + dx == 0 and cdy + dy == 0


def request_heading(candidate: Heading, current: Heading) -> Heading:
    """Return *candidate* unless it would turn the snake 180 degrees."""
    if is_reversal(candidate, current):
        return current
    return candidate


class Snake:
    """A snake stored as a head-first deque of ``(x, y)`` pixel coordinates.

    Movement is split in two steps so the caller can inspect the grown body
    before deciding whether the tail goes: :meth:`advance` only adds a head,
    :meth:`shrink` drops the tail.
    """

    def __init__(self, segments: Iterable[Coordinate], cell_size: int = 20) -> None:
        self.body: deque[Coordinate] = deque(
            (int(x), int(y)) for x, y in segments
        )
        if len(self.body) < MIN_LENGTH:
            raise ValueError(f"Snake length must be at least {MIN_LENGTH}.")
        self.cell_size = cell_size

    def __len__(self) -> int:
        return len(self.body)

    @property
    def head(self) -> Coordinate:
        """Return the head coordinate."""
        return self.body[0]

    @property
    def tail(self) -> Coordinate:
        return self.body[-1]

    def next_head(self, heading: Heading) -> Coordinate:
        """Compute where the head would land without moving."""
        dx, dy = heading.value
        x, y = self.head
        return x + dx * self.cell_size, y + dy * self.cell_size

    def advance(self, heading: Heading) -> Coordinate:
        """Push a new head one cell along *heading*. The tail is kept."""
        new_head = self.next_head(heading)
        self.body.appendleft(new_head)
        return new_head

    def grow(self) -> None:
        """Keep the segment added by :meth:`advance`.

        Growth is the absence of a :meth:`shrink` call, so there is
        nothing to do here.
        """

    def shrink(self) -> Coordinate:
        """Remove and return the tail segment."""
        return self.body.pop()

    def occupies(self, coord: Coordinate) -> bool:
        return coord in self.body

    def self_collision(self) -> bool:
        """Check whether the head overlaps any other body segment."""
        head = self.head
        return any(seg == head for seg in list(self.body)[1:])

    def segments(self) -> list[Coordinate]:
        """Return a head-first copy of the body."""
        return list(self.body)
