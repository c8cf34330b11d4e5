import pytest

from sokoban_engine.errors import ErrorCode, SokobanError
from sokoban_engine.game import Game
from sokoban_engine.moves import Direction, MoveFlags
from sokoban_engine.parser import parse_level_str
from sokoban_engine.repository import SolutionRepository

LVL = """#######
#@ $ .#
#######"""


def test_solution_saved_when_solved(tmp_path):
    lvl = parse_level_str(LVL)
    repo = SolutionRepository(tmp_path)
    game = Game(lvl, repo)
    game.move(Direction.RIGHT)
    game.move(Direction.RIGHT)
    assert not game.solved
    res = game.move(Direction.RIGHT)
    assert res & MoveFlags.SOLVED
    assert game.history == "rRR"
    assert lvl.solution == "rRR"
    assert repo.load(lvl.crc64) == "rRR"


def test_worse_solution_not_saved(tmp_path):
    lvl = parse_level_str(LVL)
    repo = SolutionRepository(tmp_path)
    lvl.solution = "rRR"
    repo.save(lvl.crc64, "rRR")
    game = Game(lvl, repo)
    game.replay("rlrRR")
    assert game.solved
    assert lvl.solution == "rRR"
    assert repo.load(lvl.crc64) == "rRR"


def test_better_solution_replaces_stored_one(tmp_path):
    lvl = parse_level_str(LVL)
    repo = SolutionRepository(tmp_path)
    lvl.solution = "rlrRR"
    game = Game(lvl, repo)
    game.replay("rRR")
    assert lvl.solution == "rRR"
    assert repo.load(lvl.crc64) == "rRR"


def test_check_solution(tmp_path):
    lvl = parse_level_str(LVL)
    game = Game(lvl)
    assert not game.check_solution()
    game.replay("rRR")
    assert game.check_solution()
    assert lvl.solution == "rRR"


def test_restart_and_undo():
    lvl = parse_level_str(LVL)
    game = Game(lvl)
    game.replay("rR")
    game.undo()
    assert game.history == "r"
    game.restart()
    assert game.history == ""
    assert (game.state.player_x, game.state.player_y) == (1, 1)
    assert (game.state.grid == lvl.grid).all()


def test_progress_round_trip(tmp_path):
    lvl = parse_level_str(LVL)
    repo = SolutionRepository(tmp_path)
    game = Game(lvl, repo)
    assert not game.save_progress()
    game.replay("rR")
    assert game.save_progress()
    assert (tmp_path / f"{lvl.crc64:016x}.sav").exists()

    other = Game(lvl, repo)
    assert other.restore_progress()
    assert other.history == "rR"
    assert (other.state.grid == game.state.grid).all()


def test_restore_without_saved_progress(tmp_path):
    game = Game(parse_level_str(LVL), SolutionRepository(tmp_path))
    assert not game.restore_progress()
    assert not Game(parse_level_str(LVL)).restore_progress()


def test_play_pasted_solution(tmp_path):
    lvl = parse_level_str(LVL)
    repo = SolutionRepository(tmp_path)
    game = Game(lvl, repo)
    game.move(Direction.RIGHT)
    assert game.play_solution(" r2R\n") == 3
    assert game.solved
    assert game.history == "rRR"
    assert repo.load(lvl.crc64) == "rRR"


def test_play_pasted_solution_rejects_garbage():
    game = Game(parse_level_str(LVL))
    game.move(Direction.RIGHT)
    for text in ("r2x", "3", ""):
        with pytest.raises(SokobanError) as exc:
            game.play_solution(text)
        assert exc.value.code == ErrorCode.INVALID_MOVE
    assert game.history == "r"


def test_plain_step_is_falsy_but_not_denied():
    game = Game(parse_level_str(LVL))
    res = game.move(Direction.RIGHT)
    assert res is not None
    assert not res
    assert game.move(Direction.UP) is None
