import numpy as np
import pytest

from sokoban_engine.parser import parse_level_str
from sokoban_engine.state import Cell, GameState

LVL = """#####
#@$.#
#####"""


def test_parse_basic_dims():
    lvl = parse_level_str(LVL)
    assert lvl.width == 5 and lvl.height == 3
    assert (lvl.player_x, lvl.player_y) == (1, 1)
    assert lvl.goal_count == 1
    assert lvl.atom_count == 1


def test_level_grid_is_read_only():
    lvl = parse_level_str(LVL)
    with pytest.raises(ValueError):
        lvl.grid[1, 1] = 0


def test_cell_outside_reads_as_wall():
    lvl = parse_level_str(LVL)
    assert lvl.cell(-1, 0) == Cell.WALL
    assert lvl.cell(5, 1) == Cell.WALL
    assert lvl.cell(2, 1) & Cell.ATOM


def test_state_is_a_copy():
    lvl = parse_level_str(LVL)
    st = GameState.from_level(lvl)
    st.grid[1, 2] = 0
    assert lvl.grid[1, 2] & Cell.ATOM
    st.moves.extend("uR")
    st.reset(lvl)
    assert st.history == ""
    assert np.array_equal(st.grid, lvl.grid)


def test_history_properties():
    lvl = parse_level_str(LVL)
    st = GameState.from_level(lvl)
    st.moves.extend("urRdL")
    assert st.history == "urRdL"
    assert st.move_count == 5
    assert st.push_count == 2
