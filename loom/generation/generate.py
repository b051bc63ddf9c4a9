"""
Map generation from a sample.

This module provides the main entry points for generating a map: learn
the sample, build a grid, collapse it. The CLI and tests go through here
rather than wiring TerrainSample and Grid together themselves.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from ..config import GenerationConfig
from ..core.tile import T
from ..logging_config import log_generation
from .grid import Grid, GridError, ProgressCallback
from .sample import TerrainSample

logger = logging.getLogger(__name__)


def generate_grid(
    sample: TerrainSample[T] | Sequence[Sequence[T]],
    config: GenerationConfig | None = None,
    progress_callback: ProgressCallback | None = None,
) -> Grid[T]:
    """
    Generate a collapsed grid from a sample.

    Args:
        sample: A TerrainSample, or raw sample rows to learn one from
        config: Size, seed and policies (defaults if None)
        progress_callback: Optional callback(collapsed, total_cells) after each step

    Returns:
        The collapsed Grid (inspect `contradictions` and `violations()`
        for how well it honours the sample)

    Raises:
        SampleError: If raw rows are not a valid sample
        ContradictionError: Under ContradictionPolicy.RAISE
    """
    if config is None:
        config = GenerationConfig()
    if not isinstance(sample, TerrainSample):
        sample = TerrainSample(sample)

    log_generation(
        logger,
        "START",
        f"{config.width}x{config.height} | seed={config.seed} "
        f"| selection={config.selection.value} | on_contradiction={config.on_contradiction.value}",
    )

    grid = Grid(
        config.width,
        config.height,
        sample,
        seed=config.seed,
        selection=config.selection,
        on_contradiction=config.on_contradiction,
    )
    grid.collapse(progress_callback=progress_callback)

    log_generation(
        logger,
        "DONE",
        f"seed={grid.last_seed} | contradictions={grid.contradictions}",
    )
    return grid


def generate_map(
    sample: TerrainSample[T] | Sequence[Sequence[T]],
    width: int = 25,
    height: int = 25,
    seed: int | None = None,
    **kwargs: Any,
) -> list[list[T]]:
    """
    Generate a map as a 2D list of tiles, indexed as result[y][x].

    Convenience wrapper around generate_grid().

    Args:
        sample: A TerrainSample, or raw sample rows
        width: Map width in cells
        height: Map height in cells
        seed: Random seed for reproducibility (None = random)
        **kwargs: Other GenerationConfig fields (selection, on_contradiction)
                  and progress_callback

    Raises:
        pydantic.ValidationError: If a setting is invalid or unknown
        GridError: If the grid could not be fully generated
    """
    progress_callback = kwargs.pop("progress_callback", None)
    config = GenerationConfig(width=width, height=height, seed=seed, **kwargs)

    grid = generate_grid(sample, config, progress_callback=progress_callback)
    tiles = grid.generate()
    if tiles is None:
        raise GridError(f"Grid left incomplete: {grid.collapsed_count}/{grid.total_cells} cells")
    return tiles
