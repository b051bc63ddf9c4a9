"""Output rendering for Loom."""

from .render import TILE_RENDER, get_tile_style, render_text

__all__ = ["TILE_RENDER", "get_tile_style", "render_text"]
