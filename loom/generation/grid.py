"""
Output grid and the collapse algorithm.

The Grid starts with every cell unassigned. Collapsing visits each cell
exactly once, picks a tile that every already-assigned neighbour was seen
next to in the sample, and moves on. There is no propagation and no
backtracking: if a cell's neighbours disagree (a contradiction), the cell
gets a random tile from the whole tileset under the default policy, which
can leave adjacency violations behind.

The algorithm:
1. Pick an unassigned cell (uniformly at random, or the most constrained one)
2. Intersect the constraint sets of its assigned neighbours
3. Assign a random tile from that intersection (or fall back)
4. Repeat until every cell is assigned
"""

from __future__ import annotations

import heapq
import logging
import random
import time
from typing import Callable, Generic, Iterator

from ..config import ContradictionPolicy, SelectionPolicy
from ..core.tile import T
from ..core.types import Direction, Position, TileIndex
from ..logging_config import log_collapse, log_contradiction
from .sample import TerrainSample

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


# -----------------------------------------------------------------------------
# Exceptions
# -----------------------------------------------------------------------------


class GridError(Exception):
    """Base exception for Grid errors."""

    pass


class InvalidGridSizeError(GridError):
    """Width or height is not a positive integer."""

    pass


class GridAlreadyCollapsedError(GridError):
    """collapse() was called on a grid that has already been collapsed."""

    pass


class ContradictionError(GridError):
    """No tile is allowed next to every assigned neighbour of a cell."""

    def __init__(self, message: str, position: Position):
        super().__init__(message)
        self.position = position


# -----------------------------------------------------------------------------
# Grid
# -----------------------------------------------------------------------------


class Grid(Generic[T]):
    """
    A width x height grid of tile indices, filled in by collapse().

    Cells hold None until assigned and never change afterward. Indices
    refer to the tileset of the sample the grid was created with.

    A grid collapses once. To generate another map, create a new Grid.
    """

    def __init__(
        self,
        width: int,
        height: int,
        sample: TerrainSample[T],
        seed: int | None = None,
        selection: SelectionPolicy = SelectionPolicy.RANDOM,
        on_contradiction: ContradictionPolicy = ContradictionPolicy.FALLBACK,
    ):
        """
        Create an empty grid.

        Args:
            width: Number of cells horizontally
            height: Number of cells vertically
            sample: Tileset and constraints to generate from
            seed: Random seed for collapse() (None = fresh seed every run)
            selection: How to pick the next cell
            on_contradiction: Fall back to any tile, or raise

        Raises:
            InvalidGridSizeError: If width or height is not an int of at least 1
        """
        for size in (width, height):
            if isinstance(size, bool) or not isinstance(size, int):
                raise InvalidGridSizeError(
                    f"Grid size must be whole numbers, got {width!r}x{height!r}"
                )
        if width < 1 or height < 1:
            raise InvalidGridSizeError(f"Grid size must be positive, got {width}x{height}")

        self.width = width
        self.height = height
        self.sample = sample
        self.seed = seed
        self.selection = selection
        self.on_contradiction = on_contradiction

        self.cells: list[list[TileIndex | None]] = [
            [None for _ in range(width)]
            for _ in range(height)
        ]

        # Stats from the collapse run
        self.steps = 0
        self.contradictions = 0
        self.last_seed: int | None = None
        self._collapsed_count = 0
        self._started = False

    @property
    def collapsed_count(self) -> int:
        """Number of cells that have been assigned."""
        return self._collapsed_count

    @property
    def total_cells(self) -> int:
        return self.width * self.height

    def is_collapsed(self) -> bool:
        """Check if every cell has been assigned."""
        return self._collapsed_count == self.total_cells

    def get_cell(self, x: int, y: int) -> TileIndex | None:
        """Tile index at (x, y), or None if unassigned or out of bounds."""
        if Position(x, y).in_bounds(self.width, self.height):
            return self.cells[y][x]
        return None

    def tile_at(self, x: int, y: int) -> T | None:
        """Tile at (x, y), or None if unassigned or out of bounds."""
        index = self.get_cell(x, y)
        if index is None:
            return None
        return self.sample.get(index)

    # -------------------------------------------------------------------------
    # Collapse
    # -------------------------------------------------------------------------

    def collapse(self, progress_callback: ProgressCallback | None = None) -> None:
        """
        Assign a tile to every cell.

        Performs exactly width * height steps. A random generator is seeded
        once at the start from `seed`, or from a fresh draw when `seed` is
        None; the seed actually used is kept in `last_seed`.

        Args:
            progress_callback: Optional callback(collapsed, total) after each step

        Raises:
            GridAlreadyCollapsedError: If the grid was collapsed before
            ContradictionError: On a contradiction under ContradictionPolicy.RAISE
                                (the grid is left partially assigned)
        """
        if self._started:
            raise GridAlreadyCollapsedError("Grid has already been collapsed; create a new one")
        self._started = True

        seed = self.seed if self.seed is not None else random.getrandbits(64)
        self.last_seed = seed
        rng = random.Random(seed)

        if self.selection == SelectionPolicy.MIN_ENTROPY:
            order = self._min_entropy_order(rng)
        else:
            order = self._random_order(rng)

        started_at = time.perf_counter()
        for position in order:
            self._collapse_cell(position, rng)
            self.steps += 1

            if progress_callback is not None:
                progress_callback(self._collapsed_count, self.total_cells)

        duration_ms = int((time.perf_counter() - started_at) * 1000)
        log_collapse(
            logger,
            self.width,
            self.height,
            seed,
            steps=self.steps,
            contradictions=self.contradictions,
            duration_ms=duration_ms,
        )

    def candidates(self, x: int, y: int) -> list[TileIndex]:
        """
        Tiles allowed at (x, y) given its assigned neighbours.

        Intersects the constraint sets of every assigned orthogonal
        neighbour. With no assigned neighbours, every tile is allowed.
        An empty list means a contradiction.
        """
        allowed: set[TileIndex] | None = None

        for neighbor in Position(x, y).neighbors(self.width, self.height):
            neighbor_index = self.cells[neighbor.y][neighbor.x]
            if neighbor_index is None:
                continue

            neighbor_allows = self.sample.constraints[neighbor_index]
            if allowed is None:
                allowed = set(neighbor_allows)
            else:
                allowed.intersection_update(neighbor_allows)

        if allowed is None:
            return list(range(len(self.sample.tileset)))
        return sorted(allowed)

    def _random_order(self, rng: random.Random) -> Iterator[Position]:
        """Yield every position once, each pick uniform among those left."""
        available = [
            Position(x, y)
            for y in range(self.height)
            for x in range(self.width)
        ]
        while available:
            chosen = rng.randrange(len(available))
            position = available[chosen]
            # Swap-remove; order of `available` is irrelevant
            available[chosen] = available[-1]
            available.pop()
            yield position

    def _min_entropy_order(self, rng: random.Random) -> Iterator[Position]:
        """
        Yield every position once, fewest candidates first.

        Each unassigned cell keeps its candidate count. After a cell is
        assigned only its four neighbours can change, so only they are
        recounted and pushed again; outdated heap entries are skipped when
        popped. Counts never grow, so an entry is current exactly when its
        count matches. Ties break on a random key drawn per entry.
        """
        full = len(self.sample.tileset)
        entropy: dict[Position, int] = {}
        heap: list[tuple[int, float, Position]] = []
        for y in range(self.height):
            for x in range(self.width):
                position = Position(x, y)
                entropy[position] = full
                heap.append((full, rng.random(), position))
        heapq.heapify(heap)

        while heap:
            count, _, position = heapq.heappop(heap)
            if entropy.get(position) != count:
                continue  # stale
            del entropy[position]

            yield position

            for neighbor in position.neighbors(self.width, self.height):
                if neighbor not in entropy:
                    continue
                new_count = len(self.candidates(neighbor.x, neighbor.y))
                if new_count != entropy[neighbor]:
                    entropy[neighbor] = new_count
                    heapq.heappush(heap, (new_count, rng.random(), neighbor))

    def _collapse_cell(self, position: Position, rng: random.Random) -> None:
        """Assign one cell from its candidates, handling contradictions."""
        candidates = self.candidates(position.x, position.y)

        if candidates:
            tile_index = rng.choice(candidates)
        else:
            self.contradictions += 1
            log_contradiction(logger, position, self.on_contradiction.value)

            if self.on_contradiction == ContradictionPolicy.RAISE:
                raise ContradictionError(
                    f"No tile fits every neighbour at ({position.x}, {position.y})",
                    position=position,
                )

            tile_index = rng.randrange(len(self.sample.tileset))

        self.cells[position.y][position.x] = tile_index
        self._collapsed_count += 1

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def generate(self) -> list[list[T]] | None:
        """
        The generated tiles, indexed as result[y][x].

        Returns None if the grid is not fully collapsed yet.
        """
        if not self.is_collapsed():
            return None

        return [
            [self.sample.tileset[index] for index in row]
            for row in self.cells
        ]

    def render(self) -> str:
        """
        Render the grid as text, one line per row.

        Unassigned cells render as the tile type's empty value.
        """
        empty = self._empty_value()
        lines = []
        for row in self.cells:
            line = "".join(
                str(empty if index is None else self.sample.tileset[index].value)
                for index in row
            )
            lines.append(line + "\n")
        return "".join(lines)

    def __str__(self) -> str:
        return self.render()

    def violations(self) -> list[tuple[Position, Position]]:
        """
        Adjacent assigned cells whose tiles were never seen together.

        Each offending pair is reported once, as (cell, east or south neighbour).
        """
        found = []
        for y, row in enumerate(self.cells):
            for x, tile_index in enumerate(row):
                if tile_index is None:
                    continue
                position = Position(x, y)
                for direction in (Direction.EAST, Direction.SOUTH):
                    neighbor = position + direction
                    neighbor_index = self.get_cell(neighbor.x, neighbor.y)
                    if neighbor_index is None:
                        continue
                    if not self.sample.allows(tile_index, neighbor_index):
                        found.append((position, neighbor))
        return found

    def _empty_value(self) -> object:
        """Renderable value of the empty tile for this grid's tile type."""
        return type(self.sample.tileset[0]).empty().value
