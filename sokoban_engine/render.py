from __future__ import annotations
from typing import Optional

import numpy as np

from .state import Cell, GameState, Level


def _symbol(cell: int, is_player: bool) -> str:
    cell &= ~Cell.FLOOR
    if cell & Cell.WALL:
        return '#'
    if cell & Cell.ATOM:
        return '*' if cell & Cell.GOAL else '$'
    if cell & Cell.GOAL:
        return '+' if is_player else '.'
    return '@' if is_player else ' '


def _render(grid: np.ndarray, px: int, py: int) -> str:
    out_lines = []
    h, w = grid.shape
    for y in range(h):
        out_lines.append(''.join(_symbol(int(grid[y, x]), (x, y) == (px, py)) for x in range(w)))
    return "\n".join(out_lines)


def render_ascii(level: Level, state: Optional[GameState] = None) -> str:
    """XSB rows of the level, or of a live game state when given."""
    if state is None:
        return _render(level.grid, level.player_x, level.player_y)
    return _render(state.grid, state.player_x, state.player_y)


def dump_level(level: Level, history: Optional[str] = None) -> str:
    """Exports a level as XSB text with its id and, if known, a solution."""
    parts = [f"; Level id: {level.crc64:016x}\n\n", render_ascii(level), "\n\n"]
    if history:
        parts.append(f"; Solution\n; {history}\n")
    else:
        parts.append("; No solution available\n")
    return "".join(parts)
