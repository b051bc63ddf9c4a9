"""Loom - generate tile maps from a small hand-drawn sample."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from . import __version__
from .config import ContradictionPolicy, GenerationConfig, SelectionPolicy
from .generation import (
    Grid,
    GridError,
    SampleError,
    TerrainSample,
    bundled_sample_path,
    bundled_samples,
    generate_grid,
    load_sample,
)
from .logging_config import log_sample, setup_logging

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE = "islands"


def resolve_sample(name_or_path: str) -> TerrainSample:
    """Load a sample from a file path, or by bundled sample name.

    Raises:
        FileNotFoundError: If it is neither a file nor a bundled sample
        SampleError: If the file is not a valid sample
    """
    path = Path(name_or_path)
    if not path.is_file():
        path = bundled_sample_path(name_or_path)

    sample = load_sample(path)
    log_sample(logger, str(path), sample.width, sample.height, len(sample.tileset))
    return sample


def run_generation(
    sample: TerrainSample,
    config: GenerationConfig,
    show_progress: bool = False,
) -> tuple[Grid, int]:
    """Collapse a grid, timing it.

    Returns:
        (grid, elapsed microseconds)
    """
    progress_callback = None
    pbar = None
    if show_progress:
        from tqdm import tqdm
        pbar = tqdm(total=config.width * config.height, desc="Collapsing", unit="cells", file=sys.stderr)
        last_progress = [0]

        def progress_callback(current: int, total: int) -> None:
            delta = current - last_progress[0]
            if delta > 0:
                pbar.update(delta)
                last_progress[0] = current

    started = time.perf_counter()
    try:
        grid = generate_grid(sample, config, progress_callback=progress_callback)
    finally:
        if pbar is not None:
            pbar.close()
    elapsed_us = int((time.perf_counter() - started) * 1_000_000)

    return grid, elapsed_us


def print_grid(grid: Grid, color: bool = False) -> None:
    """Print the grid, optionally coloured through rich."""
    if color:
        from rich.console import Console
        from .observe import render_text

        Console(highlight=False).print(render_text(grid), end="")
    else:
        print(grid.render(), end="")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="loom",
        description="Loom - generate tile maps from a small hand-drawn sample",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  loom                              # 25x25 map from the bundled islands sample
  loom my_sample.txt --width 60     # Learn from your own sample
  loom checker --seed 7             # Reproducible run
  loom --selection min-entropy      # Collapse the most constrained cells first
  loom --list-samples               # Show bundled samples

Settings can also come from LOOM_WIDTH, LOOM_HEIGHT, LOOM_SEED,
LOOM_SELECTION and LOOM_ON_CONTRADICTION (a .env file is read).
        """,
    )
    parser.add_argument(
        "sample",
        nargs="?",
        default=DEFAULT_SAMPLE,
        help=f"Sample file or bundled sample name (default: {DEFAULT_SAMPLE})",
    )
    parser.add_argument("--width", type=int, help="Output width in cells (default: 25)")
    parser.add_argument("--height", type=int, help="Output height in cells (default: 25)")
    parser.add_argument("--seed", type=int, help="Random seed for a reproducible map")
    parser.add_argument(
        "--selection",
        choices=[policy.value for policy in SelectionPolicy],
        help="How to pick the next cell (default: random)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on a contradiction instead of placing a random tile",
    )
    parser.add_argument("--color", action="store_true", help="Colour the output")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar")
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=Path("logs"),
        help="Directory for loom.log (default: logs/)",
    )
    parser.add_argument(
        "--list-samples",
        action="store_true",
        help="List bundled samples and exit",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging to console",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for Loom."""
    # Load environment variables first
    load_dotenv()

    args = build_parser().parse_args(argv)

    if args.list_samples:
        for name in bundled_samples():
            print(name)
        return 0

    setup_logging(args.log_dir, debug=args.debug)
    logger.info(f"Loom v{__version__}")

    try:
        config = GenerationConfig.from_env(
            width=args.width,
            height=args.height,
            seed=args.seed,
            selection=args.selection,
            on_contradiction=ContradictionPolicy.RAISE if args.strict else None,
        )
        sample = resolve_sample(args.sample)
        grid, elapsed_us = run_generation(sample, config, show_progress=args.progress)
    except ValidationError as e:
        print(f"Error: invalid settings: {e}", file=sys.stderr)
        return 1
    except (SampleError, GridError, OSError) as e:
        logger.warning(f"Generation failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Finished in {elapsed_us}μs:")
    print_grid(grid, color=args.color)
    print(f"Seed: {grid.last_seed}")
    if grid.contradictions:
        print(f"Contradictions: {grid.contradictions} (resolved with random tiles)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
