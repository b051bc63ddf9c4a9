"""Shared test fixtures for Loom."""

import tempfile
from pathlib import Path

import pytest

from loom.core import CharTile
from loom.generation import TerrainSample
from loom.tests.helpers import tiles


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (skipped by default, run with --run-slow)")


def pytest_addoption(parser):
    """Add --run-slow option to pytest."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run slow tests (skipped by default)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is passed."""
    if config.getoption("--run-slow"):
        return

    skip_slow = pytest.mark.skip(reason="Slow test (use --run-slow to run)")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def temp_data_dir() -> Path:
    """Create a temporary data directory for tests."""
    with tempfile.TemporaryDirectory(prefix="loom_test_") as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def checker_sample() -> TerrainSample[CharTile]:
    """The AB/BA sample: A and B only ever touch each other."""
    return TerrainSample(tiles("AB", "BA"))


@pytest.fixture
def coast_sample() -> TerrainSample[CharTile]:
    """Water, coast and land in bands: ~ touches only ~ and :, . touches only . and :."""
    return TerrainSample(tiles(
        "~~~~",
        "~::~",
        ":..:",
        "....",
    ))


@pytest.fixture
def open_sample() -> TerrainSample[CharTile]:
    """Every tile touches every tile, so no contradiction is possible."""
    return TerrainSample(tiles(
        "ABA",
        "BAB",
        "AAB",
        "BBA",
    ))
