"""Coloured console rendering for generated grids.

Plain output comes from Grid.render(); this module adds colour for terminals
by mapping common map characters to rich styles.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text

if TYPE_CHECKING:
    from ..generation.grid import Grid


# Colour for common map characters; anything else uses the default style
TILE_RENDER: dict[str, str] = {
    ".": "green",
    ",": "green",
    "\"": "bright_green",
    "≈": "blue",
    "W": "blue",
    "~": "bright_blue",
    ":": "yellow",
    "S": "yellow",
    "T": "bright_green",
    "♣": "bright_green",
    "^": "rgb(160,64,0)",
    "▲": "bright_black",
    "#": "bright_black",
    "M": "bright_black",
}


def get_tile_style(value: str) -> str:
    """Get the rich style for a rendered tile value."""
    return TILE_RENDER.get(value, "")


def render_text(grid: "Grid", palette: dict[str, str] | None = None) -> Text:
    """Render the grid as rich Text, one line per row.

    Args:
        grid: Grid to render (unassigned cells show the empty value)
        palette: Character -> style overrides merged over TILE_RENDER

    Returns:
        Text ready to print on a rich Console
    """
    styles = dict(TILE_RENDER)
    if palette:
        styles.update(palette)

    text = Text()
    # Grid.render() already handles unassigned cells, so colour its output
    for line in grid.render().splitlines():
        for char in line:
            text.append(char, style=styles.get(char, ""))
        text.append("\n")
    return text
