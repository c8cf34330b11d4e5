from __future__ import annotations
import enum
from typing import Callable, Optional

import numpy as np

from .errors import InvalidMoveError
from .state import Cell, GameState

SolvedCallback = Callable[[GameState], None]

_CLEAR_ATOM = 0xFF & ~int(Cell.ATOM)


class Direction(enum.Enum):
    """Move direction: (dx, dy, facing angle, history character)."""
    NONE = (0, 0, 0, "")
    UP = (0, -1, 0, "u")
    LEFT = (-1, 0, 270, "l")
    DOWN = (0, 1, 180, "d")
    RIGHT = (1, 0, 90, "r")

    def __init__(self, dx: int, dy: int, angle: int, char: str) -> None:
        self.dx = dx
        self.dy = dy
        self.angle = angle
        self.char = char

    @classmethod
    def from_char(cls, ch: str) -> "Direction":
        """Maps a history character (either case) to its direction."""
        try:
            return _BY_CHAR[ch.lower()]
        except KeyError:
            raise ValueError(f"not a move character: {ch!r}") from None


_BY_CHAR = {d.char: d for d in Direction if d.char}


class MoveFlags(enum.IntFlag):
    NONE = 0
    PUSHED = 1
    ON_GOAL = 2
    SOLVED = 4


def goals_filled(grid: np.ndarray) -> bool:
    """True if every goal cell holds an atom."""
    goals = (grid & Cell.GOAL) != 0
    atoms = (grid & Cell.ATOM) != 0
    return not bool(np.any(goals & ~atoms))


def is_solved(state: GameState) -> bool:
    """All goals covered, and at least one push made in this session.

    A level that starts with every goal filled is not solved until the
    player pushes something.
    """
    return goals_filled(state.grid) and any(ch.isupper() for ch in state.moves)


def move(
    state: GameState,
    direction: Direction,
    validity_check: bool = False,
    on_solved: Optional[SolvedCallback] = None,
) -> Optional[MoveFlags]:
    """Tries to move the player one cell.

    Returns None when the move is denied (nothing changes except the facing
    angle), MoveFlags otherwise. A plain step returns MoveFlags.NONE, which
    is falsy, so test the result with `is None`. With validity_check=True the
    move is only evaluated, never applied. on_solved is called with the state
    when a committed move solves the level.
    """
    state.angle = direction.angle
    if direction is Direction.NONE:
        return None

    dx, dy = direction.dx, direction.dy
    x, y = state.player_x, state.player_y
    nx, ny = x + dx, y + dy
    fx, fy = nx + dx, ny + dy

    dest = state.cell(nx, ny)
    if dest & Cell.WALL:
        return None

    res = MoveFlags.NONE
    already_solved = is_solved(state)
    if dest & Cell.ATOM:
        if already_solved:
            return None
        beyond = state.cell(fx, fy)
        if beyond & (Cell.WALL | Cell.ATOM):
            return None
        res |= MoveFlags.PUSHED
        if beyond & Cell.GOAL:
            res |= MoveFlags.ON_GOAL

    if validity_check:
        return res

    char = direction.char
    if res & MoveFlags.PUSHED:
        char = char.upper()
        state.grid[ny, nx] &= _CLEAR_ATOM
        state.grid[fy, fx] |= Cell.ATOM
    state.moves.append(char)
    state.player_x, state.player_y = nx, ny

    # a step without a push changes neither the goals nor the push count
    solved = goals_filled(state.grid) if res & MoveFlags.PUSHED else already_solved
    if solved:
        res |= MoveFlags.SOLVED
        if not already_solved and on_solved is not None:
            on_solved(state)
    return res


def undo(state: GameState) -> None:
    """Reverts the last move of the history; does nothing on an empty history."""
    if not state.moves:
        return
    char = state.moves.pop()
    direction = Direction.from_char(char)
    state.angle = direction.angle
    x, y = state.player_x, state.player_y
    if char.isupper():
        # the atom sits one cell ahead of the player
        state.grid[y + direction.dy, x + direction.dx] &= _CLEAR_ATOM
        state.grid[y, x] |= Cell.ATOM
    state.player_x = x - direction.dx
    state.player_y = y - direction.dy


def replay(
    state: GameState,
    moves: str,
    on_solved: Optional[SolvedCallback] = None,
) -> int:
    """Plays a string of history characters, returns how many moves were applied.

    The string is checked up front: any character other than udlrUDLR raises
    InvalidMoveError before anything is played. Denied moves are skipped.
    """
    directions = []
    for pos, ch in enumerate(moves):
        if ch not in "udlrUDLR":
            raise InvalidMoveError(ch, pos)
        directions.append(Direction.from_char(ch))

    applied = 0
    for d in directions:
        if move(state, d, on_solved=on_solved) is not None:
            applied += 1
    return applied
