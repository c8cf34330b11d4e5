# --- file: sokoban_engine/levels/resolve.py
from __future__ import annotations
from typing import Optional, Tuple

from ..repository import SolutionRepository
from ..state import Level
from .io import load_level_file


def parse_level_id(level_id: str) -> Tuple[str, int]:
    """Parses a string of the form "path/to/pack.xsb#3" into (path, number).

    Numbers are 1-based like the level numbers of a set; no suffix means 1.
    """
    if "#" not in level_id:
        return level_id, 1
    path, num = level_id.rsplit("#", 1)
    try:
        k = int(num)
    except ValueError:
        k = 1
    return path, k


def load_level_by_id(level_id: str, repository: Optional[SolutionRepository] = None) -> Level:
    """Loads level `number` of a pack given as "path#number"."""
    path, wanted = parse_level_id(level_id)
    levels = load_level_file(path, repository)
    if wanted < 1 or wanted > len(levels):
        raise IndexError(f"Level {wanted} out of range for {path} (total {len(levels)})")
    return levels[wanted - 1]
