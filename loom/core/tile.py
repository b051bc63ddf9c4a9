"""
Tile definition for sample-driven generation.

A Tile is a discrete unit that can occupy a cell in the grid. The generator
never looks inside a tile: it only needs to compare tiles for equality, ask
for the empty placeholder, and render them. Anything satisfying the Tile
protocol can be learned from a sample and placed in a grid.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Protocol, TypeVar, runtime_checkable


@runtime_checkable
class Tile(Protocol):
    """
    Capability contract for tile values.

    Required:
        __eq__: Equal tiles are the same tileset entry.
        empty(): The default "nothing here" instance, used when rendering
                 cells that have not been assigned yet.
        is_collapsed: Whether this instance is a resolved tile rather than
                      the empty placeholder. Grids track assignment per cell,
                      so this is only consulted for raw tile arrays.
        value: The renderable form of the tile (e.g. a single character).

    Tiles must be immutable; sharing an instance is how they are "cloned".
    """

    @classmethod
    def empty(cls) -> Tile: ...

    @property
    def is_collapsed(self) -> bool: ...

    @property
    def value(self) -> Any: ...


T = TypeVar("T", bound=Tile)


@dataclass(frozen=True)
class CharTile:
    """
    A tile represented by a single character.

    Attributes:
        char: The character this tile renders as. A space is reserved as the
              empty placeholder.
    """
    EMPTY: ClassVar[str] = " "

    char: str = EMPTY

    def __post_init__(self):
        if len(self.char) != 1:
            raise ValueError(f"CharTile needs exactly one character, got {self.char!r}")

    @classmethod
    def empty(cls) -> CharTile:
        return cls(cls.EMPTY)

    @classmethod
    def from_char(cls, char: str) -> CharTile:
        return cls(char)

    @property
    def is_collapsed(self) -> bool:
        return self.char != self.EMPTY

    @property
    def value(self) -> str:
        return self.char

    def __str__(self) -> str:
        return self.char

    def __repr__(self) -> str:
        return f"CharTile({self.char!r})"
