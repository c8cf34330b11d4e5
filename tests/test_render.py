"""Tests for the render module."""

from sokoban_engine.moves import Direction, move
from sokoban_engine.parser import parse_level_str
from sokoban_engine.render import dump_level, render_ascii
from sokoban_engine.state import GameState

LVL = """#####
#@$.#
#####"""


def test_render_basic_level():
    lvl = parse_level_str(LVL)
    assert render_ascii(lvl) == LVL


def test_render_rle_level():
    lvl = parse_level_str("5#|#@$.#|5#")
    assert render_ascii(lvl) == LVL


def test_render_outside_floor_as_space():
    lvl = parse_level_str("-#####\n-#+*.#\n-#####")
    assert render_ascii(lvl) == " #####\n #+*.#\n #####"


def test_render_state_after_push():
    lvl = parse_level_str(LVL)
    st = GameState.from_level(lvl)
    move(st, Direction.RIGHT)
    assert render_ascii(lvl, st) == "#####\n# @*#\n#####"
    # initial layout unchanged
    assert render_ascii(lvl) == LVL


def test_dump_level():
    lvl = parse_level_str(LVL)
    txt = dump_level(lvl)
    assert txt.startswith(f"; Level id: {lvl.crc64:016x}\n\n#####\n")
    assert txt.endswith("#####\n\n; No solution available\n")

    txt = dump_level(lvl, "R")
    assert txt.endswith("\n\n; Solution\n; R\n")


def test_dump_level_parses_back():
    lvl = parse_level_str(LVL)
    again = parse_level_str(dump_level(lvl, "R"))
    assert again.crc64 == lvl.crc64
    assert again.pre_comment == "Level id: " + lvl.level_id
