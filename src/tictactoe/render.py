"""
Text rendering of a state as a 3x3 grid.
Teaching notes:
- Presentation only: each cell shows X, O or a space, row-major.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .game import GameState

ROW_SEPARATOR = "═══╬═══╬═══"


def cell_glyphs(state: "GameState") -> list[str]:
    return [" " if c == "-" else c for c in state.to_board()]


def render(state: "GameState") -> str:
    g = cell_glyphs(state)
    rows = [" " + " ║ ".join(g[r * 3:r * 3 + 3]) + " " for r in range(3)]
    return ("\n" + ROW_SEPARATOR + "\n").join(rows)
