from __future__ import annotations
import logging
from collections import deque
from typing import Optional, Tuple

import numpy as np

from .crc import Crc32, crc64
from .errors import ErrorCode, LevelParseError
from .state import Cell, Level, MAX_SIZE, FIELD_SIZE

logger = logging.getLogger(__name__)

TOK_WALL = ord("#")
TOK_GOAL = ord(".")
TOK_BOX = ord("$")
TOK_BOX_ON_GOAL = ord("*")
TOK_PLAYER = ord("@")
TOK_PLAYER_ON_GOAL = ord("+")
TOK_FLOOR = frozenset(b" -_")
TOK_NEWROW = frozenset(b"\n|")
TOK_CR = ord("\r")
TOK_CELLS = frozenset((TOK_WALL, TOK_GOAL, TOK_BOX, TOK_BOX_ON_GOAL, TOK_PLAYER, TOK_PLAYER_ON_GOAL))

MAX_COMMENT_LEN = 127


class LevelReader:
    """Cursor over a buffer holding one or more concatenated levels.

    A NUL byte terminates the data just like the end of the buffer.
    """

    def __init__(self, data: bytes) -> None:
        self.data = bytes(data)
        self.pos = 0

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.data) or self.data[self.pos] == 0

    def read_byte(self) -> int:
        if self.at_end:
            return -1
        b = self.data[self.pos]
        self.pos += 1
        return b

    def read_rle(self) -> Tuple[int, int]:
        """Reads one RLE chunk and returns (repeat count, symbol).

        A decimal prefix gives the count, no prefix means 1. The count is -1
        once the data is exhausted.
        """
        count = -1
        while True:
            b = self.read_byte()
            if b < 0:
                return -1, b
            if 0x30 <= b <= 0x39:
                count = (count * 10 if count > 0 else 0) + (b - 0x30)
                continue
            return (1 if count < 0 else count), b

    def read_comment(self) -> Tuple[str, bool]:
        """Reads the rest of the current line. Returns (text, end of data reached)."""
        buf = bytearray()
        eof = False
        while True:
            b = self.read_byte()
            if b < 0:
                eof = True
                break
            if b == TOK_CR:
                continue
            if b == 0x0A:
                break
            if len(buf) < MAX_COMMENT_LEN:
                buf.append(b)
        return buf.decode("utf-8", errors="replace").strip(" "), eof


def _flood_fill(field: np.ndarray, x: int, y: int) -> None:
    """Clears every plain-floor cell 4-connected to (x, y)."""
    h, w = field.shape
    q = deque([(x, y)])
    while q:
        cx, cy = q.popleft()
        if not (0 <= cx < w and 0 <= cy < h):
            continue
        if field[cy, cx] != Cell.FLOOR:
            continue
        field[cy, cx] = 0
        q.append((cx + 1, cy))
        q.append((cx - 1, cy))
        q.append((cx, cy + 1))
        q.append((cx, cy - 1))


def legacy_crc32(field: np.ndarray, width: int, height: int) -> int:
    """CRC32 of a shifted 64x64 field the way pre-1.0.7 saves computed it.

    Axes are swapped: rows are bounded by the width and columns by the
    height, so part of the level is skipped and cells outside it are read.
    The player position is not included. Kept bit-for-bit so that solutions
    stored under this key can still be found.
    """
    crc = Crc32()
    crc.feed(np.ascontiguousarray(field[:width, :height]).tobytes())
    return crc.finish()


def level_crc64(grid: np.ndarray, player_x: int, player_y: int) -> int:
    """Fingerprint of a trimmed grid seeded with the player's start position."""
    crc = crc64(0, bytes([player_x & 0xFF, player_y & 0xFF]))
    return crc64(crc, np.ascontiguousarray(grid, dtype=np.uint8).tobytes())


def parse_level(reader: LevelReader) -> Tuple[Level, bool]:
    """Parses the next level from `reader`.

    Returns (level, end of data reached). The level ends at the first comment
    line following its rows, or at the end of the data. Raises LevelParseError.
    """
    # working field, indexed [y, x], shifted by +1 on both axes
    field = np.full((FIELD_SIZE, FIELD_SIZE), Cell.FLOOR, dtype=np.uint8)
    x = y = 0
    width = height = 0
    player: Optional[Tuple[int, int]] = None
    started = False
    # set once a wall, atom, goal or player is written; rows of spaces alone are not a level
    has_cells = False
    finished = False
    eof = False
    pre_comment = ""
    post_comment = ""

    while not (finished or eof):
        count, sym = reader.read_rle()
        if count < 0:
            eof = True
            break
        if sym == TOK_CR:
            continue
        if sym in TOK_NEWROW and not started:
            count = min(count, 1)
        # any longer run overflows the row or the level anyway
        for _ in range(min(count, MAX_SIZE + 1)):
            if sym in TOK_FLOOR:
                field[y + 1, x + 1] |= Cell.FLOOR
                x += 1
            elif sym == TOK_WALL:
                field[y + 1, x + 1] |= Cell.WALL
                x += 1
            elif sym == TOK_PLAYER:
                field[y + 1, x + 1] |= Cell.FLOOR
                player = (x, y)
                x += 1
            elif sym == TOK_BOX_ON_GOAL:
                field[y + 1, x + 1] |= Cell.GOAL | Cell.ATOM
                x += 1
            elif sym == TOK_BOX:
                field[y + 1, x + 1] |= Cell.ATOM
                x += 1
            elif sym == TOK_PLAYER_ON_GOAL:
                field[y + 1, x + 1] |= Cell.GOAL
                player = (x, y)
                x += 1
            elif sym == TOK_GOAL:
                field[y + 1, x + 1] |= Cell.GOAL
                x += 1
            elif sym in TOK_NEWROW:
                if started:
                    y += 1
                x = 0
            else:
                # anything else starts a comment running to the end of the line
                text, eof = reader.read_comment()
                if started:
                    finished = True
                    post_comment = text
                elif not pre_comment:
                    pre_comment = text
                break

            if x > 0:
                started = True
                if sym in TOK_CELLS:
                    has_cells = True
            if x >= MAX_SIZE:
                raise LevelParseError(ErrorCode.LEVEL_TOO_LARGE, f"row {y + 1}")
            if y >= MAX_SIZE:
                raise LevelParseError(ErrorCode.LEVEL_TOO_HIGH)
            width = max(width, x)
            if x > 0 and y >= height:
                height = y + 1

    if not has_cells:
        raise LevelParseError(ErrorCode.NO_LEVEL_DATA_FOUND, data_seen=False)
    if player is None:
        raise LevelParseError(ErrorCode.PLAYER_POS_UNDEFINED)
    if width < 1 or height < 1:
        raise LevelParseError(ErrorCode.LEVEL_TOO_SMALL)

    # drop the floor flags the padding area got from the initial fill
    _flood_fill(field, FIELD_SIZE - 1, FIELD_SIZE - 1)

    # remove the padding row and column
    shifted = field.copy()
    shifted[:-1, :-1] = field[1:, 1:]

    grid = shifted[:height, :width].copy()
    px, py = player
    level = Level(
        width=width,
        height=height,
        grid=grid,
        player_x=px,
        player_y=py,
        crc64=level_crc64(grid, px, py),
        crc32_legacy=legacy_crc32(shifted, width, height),
        pre_comment=pre_comment,
        comment=post_comment,
    )
    logger.debug("parsed %dx%d level, crc64=%016x (legacy crc32=%08X)",
                 width, height, level.crc64, level.crc32_legacy)
    return level, eof


def parse_level_str(level_str: str) -> Level:
    """Parses the first level found in an XSB string."""
    level, _ = parse_level(LevelReader(level_str.encode("utf-8")))
    return level


def parse_level_file(path: str) -> Level:
    with open(path, "rb") as f:
        level, _ = parse_level(LevelReader(f.read()))
    return level
