"""
Terrain sample: the hand-authored example a map is learned from.

A TerrainSample turns a small grid of tile values into the two things the
generator needs:
    tileset:     the distinct tiles, in the order they were first seen
    constraints: for each tile, which tiles were ever seen right next to it

Adjacency is learned without direction. If "~" sits above "." anywhere in
the sample, then "." may appear next to "~" on any side, and vice versa.
"""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from typing import Generic, Sequence

from ..core.tile import CharTile, T
from ..core.types import Position, TileIndex

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Exceptions
# -----------------------------------------------------------------------------


class SampleError(Exception):
    """Base exception for sample errors."""

    pass


class InvalidSampleShapeError(SampleError):
    """Sample is empty or its rows have unequal length."""

    def __init__(self, message: str, row: int | None = None):
        super().__init__(message)
        self.row = row


class ReservedTileError(SampleError):
    """Sample contains the empty placeholder as a real tile."""

    def __init__(self, message: str, position: Position | None = None):
        super().__init__(message)
        self.position = position


# -----------------------------------------------------------------------------
# TerrainSample
# -----------------------------------------------------------------------------


def validate_shape(rows: Sequence[Sequence[object]]) -> tuple[int, int]:
    """
    Check that rows form a non-empty rectangle.

    Returns:
        (width, height) of the sample

    Raises:
        InvalidSampleShapeError: If there are no rows, a row is empty,
            or rows differ in length
    """
    if not rows:
        raise InvalidSampleShapeError("Sample has no rows")

    width = len(rows[0])
    if width == 0:
        raise InvalidSampleShapeError("Sample row 0 is empty", row=0)

    for y, row in enumerate(rows):
        if len(row) != width:
            raise InvalidSampleShapeError(
                f"Sample row {y} has {len(row)} tiles, expected {width}", row=y
            )

    return width, len(rows)


class TerrainSample(Generic[T]):
    """
    Tileset and adjacency constraints learned from a sample grid.

    Built once, read-only afterward. Tiles are stored once in `tileset`
    and referred to everywhere else by their index.

    Attributes:
        tileset: Distinct tiles in first-seen (row-major) order
        map: Tile index of every sample cell, indexed as map[y][x]
        constraints: For each tile index, sorted tile indices observed as
                     an orthogonal neighbour of that tile
    """

    def __init__(self, rows: Sequence[Sequence[T]]):
        """
        Learn a tileset and constraints from a rectangular grid of tiles.

        Args:
            rows: Sample tiles, one sequence per row

        Raises:
            InvalidSampleShapeError: If rows are empty or ragged
        """
        self.width, self.height = validate_shape(rows)

        tileset: list[T] = []
        index_map: list[tuple[TileIndex, ...]] = []
        for row in rows:
            indices = []
            for tile in row:
                # Lookup by equality, so unhashable tiles work too
                for index, known in enumerate(tileset):
                    if known == tile:
                        break
                else:
                    index = len(tileset)
                    tileset.append(tile)
                indices.append(index)
            index_map.append(tuple(indices))

        self.tileset: tuple[T, ...] = tuple(tileset)
        self.map: tuple[tuple[TileIndex, ...], ...] = tuple(index_map)
        self.constraints: tuple[tuple[TileIndex, ...], ...] = self._generate_constraints()

        logger.debug(
            f"Learned {len(self.tileset)} tiles from {self.width}x{self.height} sample"
        )

    @classmethod
    def from_text(cls, text: str) -> TerrainSample[CharTile]:
        """Build a character sample from text, one line per row."""
        return cls(read_sample_text(text))

    def __len__(self) -> int:
        return len(self.tileset)

    def __repr__(self) -> str:
        return f"TerrainSample({self.width}x{self.height}, tiles={len(self.tileset)})"

    def get(self, index: TileIndex) -> T | None:
        """Get the tile for an index, or None if out of range."""
        if 0 <= index < len(self.tileset):
            return self.tileset[index]
        return None

    def get_tile_index(self, x: int, y: int) -> TileIndex | None:
        """Get the tile index of the sample cell at (x, y), or None if out of bounds."""
        if Position(x, y).in_bounds(self.width, self.height):
            return self.map[y][x]
        return None

    def neighbors(self, x: int, y: int) -> list[TileIndex]:
        """
        Tile indices of the in-bounds orthogonal neighbours of (x, y).

        Corners have 2 neighbours, edges 3, interior cells 4.
        """
        return [
            self.map[neighbor.y][neighbor.x]
            for neighbor in Position(x, y).neighbors(self.width, self.height)
        ]

    def allows(self, tile_index: TileIndex, neighbor_index: TileIndex) -> bool:
        """Check whether two tiles were ever observed side by side."""
        return neighbor_index in self.constraints[tile_index]

    def _generate_constraints(self) -> tuple[tuple[TileIndex, ...], ...]:
        """Collect every neighbour seen next to each tile."""
        constraints: list[set[TileIndex]] = [set() for _ in self.tileset]

        for y, row in enumerate(self.map):
            for x, tile_index in enumerate(row):
                constraints[tile_index].update(self.neighbors(x, y))

        return tuple(tuple(sorted(allowed)) for allowed in constraints)


# -----------------------------------------------------------------------------
# Reading samples
# -----------------------------------------------------------------------------


def read_sample_text(text: str) -> list[list[CharTile]]:
    """
    Parse sample text into rows of CharTiles.

    One line per row, one character per column. Trailing blank lines are
    ignored. The space character is the empty placeholder, so it may not
    appear in a sample.

    Raises:
        InvalidSampleShapeError: If the text has no rows or ragged rows
        ReservedTileError: If a space appears in the sample
    """
    lines = text.splitlines()
    while lines and not lines[-1]:
        lines.pop()

    rows = [[CharTile.from_char(char) for char in line] for line in lines]
    validate_shape(rows)

    for y, row in enumerate(rows):
        for x, tile in enumerate(row):
            if not tile.is_collapsed:
                raise ReservedTileError(
                    f"Sample uses the reserved empty character at ({x}, {y})",
                    position=Position(x, y),
                )

    return rows


def load_sample(path: Path | str) -> TerrainSample[CharTile]:
    """
    Load a character sample from a UTF-8 text file (a leading BOM is skipped).

    Raises:
        OSError: If the file cannot be read
        SampleError: If the contents are not a valid sample
    """
    sample_path = Path(path)
    logger.debug(f"Loading sample from {sample_path}")
    return TerrainSample(read_sample_text(sample_path.read_text(encoding="utf-8-sig")))


def bundled_samples() -> list[str]:
    """Names of the samples shipped with Loom."""
    folder = resources.files("loom") / "samples"
    return sorted(
        entry.name.removesuffix(".txt")
        for entry in folder.iterdir()
        if entry.name.endswith(".txt")
    )


def bundled_sample_path(name: str) -> Path:
    """
    Path to a bundled sample by name (e.g. "islands").

    Raises:
        FileNotFoundError: If no bundled sample has that name
    """
    path = Path(str(resources.files("loom") / "samples" / f"{name}.txt"))
    if not path.is_file():
        raise FileNotFoundError(f"No bundled sample named {name!r}")
    return path
