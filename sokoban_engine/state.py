from __future__ import annotations
import enum
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

__all__ = [
    "Cell",
    "Level",
    "GameState",
    "MAX_SIZE",
    "FIELD_SIZE",
]

# usable extents; one padding cell on each side brings the working field to 64x64
MAX_SIZE = 62
FIELD_SIZE = 64


class Cell(enum.IntFlag):
    FLOOR = 1
    ATOM = 2
    GOAL = 4
    WALL = 8


@dataclass(slots=True, eq=False)
class Level:
    """
    One parsed level.

    The grid is a read-only uint8 array of Cell flags, shape (height, width),
    indexed [y, x]. Everything except `solution` (refreshed from the solution
    repository) and `number` (assigned by the set loader) is fixed after parsing.
    """

    width: int
    height: int
    grid: np.ndarray
    player_x: int
    player_y: int
    crc64: int
    crc32_legacy: int
    pre_comment: str = ""
    comment: str = ""
    number: int = 0
    solution: Optional[str] = None

    def __post_init__(self) -> None:
        self.grid.flags.writeable = False


    # ---- convenient checks
    def cell(self, x: int, y: int) -> int:
        """Cell flags at (x, y); anything outside the grid reads as a wall."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return int(self.grid[y, x])
        return int(Cell.WALL)


    @property
    def level_id(self) -> str:
        return f"{self.crc64:016x}"


    @property
    def goal_count(self) -> int:
        return int(np.count_nonzero(self.grid & Cell.GOAL))


    @property
    def atom_count(self) -> int:
        return int(np.count_nonzero(self.grid & Cell.ATOM))


@dataclass(slots=True, eq=False)
class GameState:
    """
    Mutable per-session state: live copy of the grid, player position,
    facing angle (0/90/180/270) and the move history.

    History characters: lowercase = simple move, uppercase = push.
    """

    grid: np.ndarray
    player_x: int
    player_y: int
    angle: int = 0
    moves: List[str] = field(default_factory=list)

    @classmethod
    def from_level(cls, level: Level) -> "GameState":
        return cls(grid=level.grid.copy(), player_x=level.player_x, player_y=level.player_y)


    def reset(self, level: Level) -> None:
        self.grid = level.grid.copy()
        self.player_x = level.player_x
        self.player_y = level.player_y
        self.angle = 0
        self.moves.clear()


    # ---- history
    @property
    def history(self) -> str:
        return "".join(self.moves)


    @property
    def move_count(self) -> int:
        return len(self.moves)


    @property
    def push_count(self) -> int:
        return sum(1 for ch in self.moves if ch.isupper())


    # ---- grid access
    def in_bounds(self, x: int, y: int) -> bool:
        h, w = self.grid.shape
        return 0 <= x < w and 0 <= y < h


    def cell(self, x: int, y: int) -> int:
        """Cell flags at (x, y); anything outside the grid reads as a wall."""
        if self.in_bounds(x, y):
            return int(self.grid[y, x])
        return int(Cell.WALL)
