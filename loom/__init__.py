"""Loom - sample-driven tile map generation."""

__version__ = "0.1.0"
