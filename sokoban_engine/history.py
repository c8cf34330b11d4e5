"""Move histories: length/push accessors, the solution quality rule and the
nibble run-length format solutions are stored in.

Each byte of a stored solution is one run: the high nibble holds the run
length (1..15), the low nibble the move code (u l d r = 0..3, U L D R = 4..7).
"""
from __future__ import annotations
import logging
from typing import Optional

from .errors import CorruptSolutionError

logger = logging.getLogger(__name__)

MOVE_CODES = {ch: code for code, ch in enumerate("uldrULDR")}
CODE_MOVES = {code: ch for ch, code in MOVE_CODES.items()}
CODE_ERR = 8
MAX_RUN = 15


def history_len(history: Optional[str]) -> int:
    return len(history) if history else 0


def history_pushes(history: Optional[str]) -> int:
    if not history:
        return 0
    return sum(1 for ch in history if "A" <= ch <= "Z")


def is_better(candidate: str, incumbent: Optional[str]) -> bool:
    """True if `candidate` should replace `incumbent`.

    Fewer moves wins; on equal moves fewer pushes wins; ties keep the
    incumbent. A missing or empty incumbent is always replaced.
    """
    best_len = history_len(incumbent)
    if best_len < 1:
        return True
    my_len = history_len(candidate)
    if my_len != best_len:
        return my_len < best_len
    return history_pushes(candidate) < history_pushes(incumbent)


def encode_history(history: str) -> bytes:
    """Run-length encodes a history; encoding stops at the first unknown character."""
    out = bytearray()
    last = -1
    count = 0
    for pos, ch in enumerate(history):
        code = MOVE_CODES.get(ch, CODE_ERR)
        if code == CODE_ERR:
            logger.warning("history truncated at position %d (invalid move %r)", pos, ch)
            break
        if code == last and count < MAX_RUN:
            count += 1
            continue
        if count > 0:
            out.append((count << 4) | last)
        last = code
        count = 1
    if count > 0:
        out.append((count << 4) | last)
    return bytes(out)


def decode_history(data: bytes) -> str:
    """Expands a stored solution back into a history string.

    Raises CorruptSolutionError on any move code outside 0..7.
    """
    chunks = []
    for pos, b in enumerate(data):
        run, code = b >> 4, b & 0x0F
        ch = CODE_MOVES.get(code)
        if ch is None:
            raise CorruptSolutionError(f"byte {pos}: move code {code}")
        chunks.append(ch * run)
    return "".join(chunks)


def expand_rle(text: str) -> str:
    """Expands digit-prefixed runs in a move string ("3r2U" -> "rrrUU")."""
    out = []
    count = -1
    for ch in text:
        if "0" <= ch <= "9":
            count = (0 if count < 0 else count * 10) + int(ch)
            continue
        out.append(ch * (1 if count < 0 else count))
        count = -1
    return "".join(out)


def is_legal_solution(text: Optional[str]) -> bool:
    """Accepts non-empty strings of udlrUDLR, optionally RLE-prefixed.

    A digit must be followed by something.
    """
    if not text:
        return False
    if "0" <= text[-1] <= "9":
        return False
    return all(ch in MOVE_CODES or ch in "0123456789" for ch in text)
