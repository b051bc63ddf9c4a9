"""Core value types for Loom.

Pure data with no I/O: positions, directions and the tile contract.

Usage:
    from loom.core import Position, Direction, Tile, CharTile
"""

from .types import Direction, Position, TileIndex
from .tile import CharTile, Tile

__all__ = [
    "Direction",
    "Position",
    "TileIndex",
    "Tile",
    "CharTile",
]
