from __future__ import annotations
import zlib
from typing import Iterable, List

# CRC-64/Jones, reflected form (the variant shipped with Redis).
# No final xor, so the value can be fed incrementally.
CRC64_POLY = 0x95AC9329AC4BC9B5
_MASK64 = 0xFFFFFFFFFFFFFFFF


def _make_table(poly: int) -> List[int]:
    table = [0] * 256
    for i in range(256):
        crc = i
        for _ in range(8):
            if crc & 1:
                crc = (crc >> 1) ^ poly
            else:
                crc >>= 1
        table[i] = crc & _MASK64
    return table


_CRC64_TABLE = _make_table(CRC64_POLY)


def crc64(crc: int, data: Iterable[int]) -> int:
    """Continue a CRC-64 over `data` (bytes or any iterable of byte values)."""
    table = _CRC64_TABLE
    for b in data:
        crc = table[(crc ^ b) & 0xFF] ^ (crc >> 8)
    return crc & _MASK64


class Crc32:
    """Incremental standard CRC-32 (init/feed/finish), backed by zlib."""
    def __init__(self) -> None:
        self.value = 0

    def feed(self, data: bytes) -> None:
        self.value = zlib.crc32(data, self.value)

    def finish(self) -> int:
        return self.value & 0xFFFFFFFF
