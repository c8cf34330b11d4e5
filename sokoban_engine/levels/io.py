from __future__ import annotations
import gzip
import logging
import os
import zlib
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Sequence

from ..errors import ErrorCode, LevelParseError, SokobanError
from ..parser import LevelReader, parse_level
from ..repository import SolutionRepository
from ..state import Level

logger = logging.getLogger(__name__)

MAX_LEVELS = 4096
MAX_FILE_SIZE = 1024 * 1024 * 1024
LEVEL_SUFFIXES = (".xsb", ".txt", ".sok", ".xsb.gz", ".txt.gz")


@dataclass
class LevelSet:
    """Ordered levels of one pack; `description` is the first level's pre-comment."""
    levels: List[Level] = field(default_factory=list)
    description: str = ""

    def __len__(self) -> int:
        return len(self.levels)

    def __iter__(self) -> Iterator[Level]:
        return iter(self.levels)

    def __getitem__(self, index: int) -> Level:
        return self.levels[index]

    @property
    def solved_count(self) -> int:
        return sum(1 for lvl in self.levels if lvl.solution)

    def is_last_unsolved(self, index: int) -> bool:
        """True if the level at `index` is the only one without a solution."""
        if index < 0 or self.levels[index].solution:
            return False
        return all(lvl.solution for i, lvl in enumerate(self.levels) if i != index)


# ---- gzip

def is_gz(data: bytes) -> bool:
    """Looks like a gzip stream using the store or deflate method."""
    return len(data) >= 16 and data[0] == 0x1F and data[1] == 0x8B and data[2] in (0, 8)


def ungz(data: bytes) -> bytes:
    try:
        return gzip.decompress(data)
    except (OSError, EOFError, zlib.error) as exc:
        raise SokobanError(ErrorCode.UNABLE_TO_OPEN_FILE, f"bad gzip data: {exc}") from exc


# ---- loading

def load_solutions(levels: Iterable[Level], repository: SolutionRepository) -> None:
    """Refreshes the best known solution of every level."""
    for lvl in levels:
        lvl.solution = repository.load_best(lvl.crc64, lvl.crc32_legacy)


def load_level_set(
    data: bytes,
    repository: Optional[SolutionRepository] = None,
    max_levels: int = MAX_LEVELS,
) -> LevelSet:
    """Parses every level of a (possibly gzipped) buffer.

    Trailing comments after the last level end the set; any other parse error
    is raised and nothing is returned. More than `max_levels` levels raises
    SokobanError(TOO_MANY_LEVELS).
    """
    if not data:
        raise SokobanError(ErrorCode.UNABLE_TO_OPEN_FILE, "empty buffer")
    if is_gz(data):
        data = ungz(data)

    reader = LevelReader(data)
    result = LevelSet()
    eof = False
    while not eof:
        try:
            level, eof = parse_level(reader)
        except LevelParseError as exc:
            if result.levels and not exc.data_seen:
                break
            raise
        if len(result.levels) >= max_levels:
            raise SokobanError(ErrorCode.TOO_MANY_LEVELS, f"limit is {max_levels}")
        level.number = len(result.levels) + 1
        if level.number == 1:
            result.description = level.pre_comment
        if repository is not None:
            level.solution = repository.load_best(level.crc64, level.crc32_legacy)
        result.levels.append(level)

    logger.info("loaded %d levels (%d with a known solution)", len(result), result.solved_count)
    return result


def load_level_file(
    path: str,
    repository: Optional[SolutionRepository] = None,
    max_levels: int = MAX_LEVELS,
) -> LevelSet:
    try:
        size = os.path.getsize(path)
        if size == 0 or size > MAX_FILE_SIZE:
            raise SokobanError(ErrorCode.UNABLE_TO_OPEN_FILE, f"{path}: unexpected size {size}")
        with open(path, "rb") as f:
            data = f.read()
    except OSError as exc:
        raise SokobanError(ErrorCode.UNABLE_TO_OPEN_FILE, f"{path}: {exc.strerror}") from exc
    return load_level_set(data, repository, max_levels)


def iterate_level_files(root_dir: str, rel_dirs: Sequence[str],
                        suffixes: Sequence[str] = LEVEL_SUFFIXES) -> Iterator[str]:
    """Iterate over all level packs in the given subfolders, sorted by name."""
    for rel in rel_dirs:
        abs_dir = os.path.join(root_dir, rel)
        if not os.path.isdir(abs_dir):
            logger.warning("skipping missing level directory %s", abs_dir)
            continue
        for fname in sorted(os.listdir(abs_dir)):
            if fname.lower().endswith(tuple(suffixes)):
                yield os.path.join(abs_dir, fname)
