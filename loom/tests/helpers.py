"""Test helpers for building samples."""

from loom.core import CharTile


def tiles(*lines: str) -> list[list[CharTile]]:
    """Build sample rows from strings, one per row."""
    return [[CharTile(char) for char in line] for line in lines]
