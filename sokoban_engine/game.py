from __future__ import annotations
import logging
from typing import Optional

from .errors import ErrorCode, SokobanError
from .history import expand_rle, is_better, is_legal_solution
from .moves import Direction, MoveFlags, is_solved, move, replay, undo
from .repository import EXT_PROGRESS, EXT_SOLUTION, SolutionRepository
from .state import GameState, Level

logger = logging.getLogger(__name__)


class Game:
    """One play session on a level.

    The level itself is never modified; moves act on a GameState copy. When a
    move solves the level, the history is stored in the repository if it beats
    the best known solution.
    """

    def __init__(self, level: Level, repository: Optional[SolutionRepository] = None) -> None:
        self.level = level
        self.repository = repository
        self.state = GameState.from_level(level)

    @property
    def solved(self) -> bool:
        return is_solved(self.state)

    @property
    def history(self) -> str:
        return self.state.history

    def move(self, direction: Direction, validity_check: bool = False) -> Optional[MoveFlags]:
        """None means denied; a plain step returns MoveFlags.NONE, which is falsy."""
        return move(self.state, direction, validity_check, on_solved=self._on_solved)

    def undo(self) -> None:
        undo(self.state)

    def replay(self, moves: str) -> int:
        return replay(self.state, moves, on_solved=self._on_solved)

    def restart(self) -> None:
        self.state.reset(self.level)

    def play_solution(self, text: str) -> int:
        """Restarts the level and plays a pasted solution such as "3r2Ul".

        Raises SokobanError(INVALID_MOVE) if the text is not a move string.
        """
        text = text.strip()
        if not is_legal_solution(text):
            raise SokobanError(ErrorCode.INVALID_MOVE, "not a solution string")
        self.restart()
        return self.replay(expand_rle(text))

    def check_solution(self) -> bool:
        """Returns whether the level is solved, recording the history if it is a new best."""
        if not self.solved:
            return False
        self._on_solved(self.state)
        return True

    def _on_solved(self, state: GameState) -> None:
        history = state.history
        if not is_better(history, self.level.solution):
            return
        logger.info("level %d solved in %d moves / %d pushes (new best)",
                    self.level.number, state.move_count, state.push_count)
        if self.repository is not None:
            self.repository.save(self.level.crc64, history, EXT_SOLUTION)
        self.level.solution = history

    # ---- in-progress games
    def save_progress(self) -> bool:
        if self.repository is None or not self.state.moves:
            return False
        self.repository.save(self.level.crc64, self.state.history, EXT_PROGRESS)
        return True

    def restore_progress(self) -> bool:
        """Restarts the level and replays the saved in-progress history, if any."""
        if self.repository is None:
            return False
        saved = self.repository.load(self.level.crc64, EXT_PROGRESS)
        if saved is None:
            return False
        self.restart()
        self.replay(saved)
        return True
