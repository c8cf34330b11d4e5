from __future__ import annotations
import enum


class ErrorCode(enum.IntEnum):
    UNDEFINED = -1
    LEVEL_TOO_HIGH = -2
    LEVEL_TOO_LARGE = -3
    LEVEL_TOO_SMALL = -4
    MEM_ALLOC_FAILED = -5
    NO_LEVEL_DATA_FOUND = -6
    TOO_MANY_LEVELS = -7
    UNABLE_TO_OPEN_FILE = -8
    PLAYER_POS_UNDEFINED = -9
    INVALID_MOVE = -10
    CORRUPT_SOLUTION = -11


_MESSAGES = {
    ErrorCode.UNDEFINED: "Undefined error",
    ErrorCode.LEVEL_TOO_HIGH: "Level height too high",
    ErrorCode.LEVEL_TOO_LARGE: "Level width too large",
    ErrorCode.LEVEL_TOO_SMALL: "Level dimensions too small",
    ErrorCode.MEM_ALLOC_FAILED: "Memory allocation failed - out of memory?",
    ErrorCode.NO_LEVEL_DATA_FOUND: "No level data found in file",
    ErrorCode.TOO_MANY_LEVELS: "Too many levels in set",
    ErrorCode.UNABLE_TO_OPEN_FILE: "Failed to open file",
    ErrorCode.PLAYER_POS_UNDEFINED: "Player position not defined",
    ErrorCode.INVALID_MOVE: "Invalid move character",
    ErrorCode.CORRUPT_SOLUTION: "Corrupted solution data",
}


def strerror(code: int) -> str:
    """Human-readable description of an error code."""
    try:
        return _MESSAGES[ErrorCode(code)]
    except ValueError:
        return "Unknown error"


class SokobanError(ValueError):
    """Base error; carries an ErrorCode next to the message."""

    def __init__(self, code: ErrorCode, detail: str = "") -> None:
        self.code = ErrorCode(code)
        msg = strerror(self.code)
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class LevelParseError(SokobanError):
    def __init__(self, code: ErrorCode, detail: str = "", data_seen: bool = True) -> None:
        super().__init__(code, detail)
        # False when only comments/blank lines were consumed before failing
        self.data_seen = data_seen


class InvalidMoveError(SokobanError):
    def __init__(self, char: str, position: int) -> None:
        super().__init__(ErrorCode.INVALID_MOVE, f"{char!r} at position {position}")
        self.char = char
        self.position = position


class CorruptSolutionError(SokobanError):
    def __init__(self, detail: str = "") -> None:
        super().__init__(ErrorCode.CORRUPT_SOLUTION, detail)
