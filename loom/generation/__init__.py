"""Map generation for Loom."""

from .sample import (
    TerrainSample,
    SampleError,
    InvalidSampleShapeError,
    ReservedTileError,
    read_sample_text,
    load_sample,
    bundled_samples,
    bundled_sample_path,
)
from .grid import (
    Grid,
    GridError,
    InvalidGridSizeError,
    GridAlreadyCollapsedError,
    ContradictionError,
    SelectionPolicy,
    ContradictionPolicy,
)
from .generate import generate_grid, generate_map

__all__ = [
    "TerrainSample",
    "SampleError",
    "InvalidSampleShapeError",
    "ReservedTileError",
    "read_sample_text",
    "load_sample",
    "bundled_samples",
    "bundled_sample_path",
    "Grid",
    "GridError",
    "InvalidGridSizeError",
    "GridAlreadyCollapsedError",
    "ContradictionError",
    "SelectionPolicy",
    "ContradictionPolicy",
    "generate_grid",
    "generate_map",
]
