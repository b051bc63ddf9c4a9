"""Foundational types for Loom.

This module defines the small value types shared by the sample and grid code:
- Position: Grid coordinates (x, y)
- Direction: Cardinal directions with offsets
- Type alias for tile indices
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator, NamedTuple

# Index into a sample's deduplicated tileset
TileIndex = int


class Direction(Enum):
    """Cardinal directions used to find orthogonal neighbours.

    Coordinate system follows text layout: x increases to the right,
    y increases downward (row 0 is the first line of a sample).
    """

    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"

    @property
    def offset(self) -> tuple[int, int]:
        """Get the (dx, dy) offset for this direction."""
        return _DIRECTION_OFFSETS[self]


_DIRECTION_OFFSETS: dict[Direction, tuple[int, int]] = {
    Direction.NORTH: (0, -1),
    Direction.SOUTH: (0, 1),
    Direction.EAST: (1, 0),
    Direction.WEST: (-1, 0),
}


class Position(NamedTuple):
    """A cell position: column ``x``, row ``y``."""

    x: int
    y: int

    def __add__(self, other: object) -> Position:
        """Step one cell in a direction."""
        if isinstance(other, Direction):
            dx, dy = other.offset
            return Position(self.x + dx, self.y + dy)
        return NotImplemented

    def in_bounds(self, width: int, height: int) -> bool:
        """Check whether this position lies inside a width x height area."""
        return 0 <= self.x < width and 0 <= self.y < height

    def neighbors(self, width: int, height: int) -> Iterator[Position]:
        """Yield the in-bounds orthogonal neighbours (no wraparound)."""
        for direction in Direction:
            neighbor = self + direction
            if neighbor.in_bounds(width, height):
                yield neighbor
