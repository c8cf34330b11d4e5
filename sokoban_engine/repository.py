from __future__ import annotations
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional

from .errors import CorruptSolutionError
from .history import decode_history, encode_history

logger = logging.getLogger(__name__)

EXT_SOLUTION = "sol"
EXT_LEGACY = "dat"
EXT_PROGRESS = "sav"


def is_legacy_ext(ext: str) -> bool:
    return ext[:1].lower() == "d"


def solution_filename(key: int, ext: str) -> str:
    """File name for a fingerprint: 16 hex digits, or 8 upper-case ones for legacy .dat keys."""
    if is_legacy_ext(ext):
        return f"{key & 0xFFFFFFFF:08X}.{ext}"
    return f"{key & 0xFFFFFFFFFFFFFFFF:016x}.{ext}"


class SolutionRepository:
    """Best-known histories stored as files keyed by level fingerprint.

    Reads look in `save_dir` first, then in each legacy directory; writes only
    ever go to `save_dir`.
    """

    def __init__(self, save_dir: str | os.PathLike, legacy_dirs: Iterable[str | os.PathLike] = ()) -> None:
        self.save_dir = Path(save_dir)
        self.legacy_dirs: List[Path] = [Path(d) for d in legacy_dirs]

    def _candidates(self, key: int, ext: str) -> List[Path]:
        names = [solution_filename(key, ext)]
        if is_legacy_ext(ext):
            names.append(names[0].lower())
        return [d / n for d in [self.save_dir, *self.legacy_dirs] for n in names]

    def read_blob(self, key: int, ext: str = EXT_SOLUTION) -> Optional[bytes]:
        for path in self._candidates(key, ext):
            try:
                data = path.read_bytes()
            except FileNotFoundError:
                continue
            except OSError as exc:
                logger.warning("cannot read %s: %s", path, exc)
                continue
            return data or None
        return None

    def write_blob(self, key: int, ext: str, data: bytes) -> Path:
        self.save_dir.mkdir(parents=True, exist_ok=True)
        path = self.save_dir / solution_filename(key, ext)
        fd, tmp = tempfile.mkstemp(dir=self.save_dir, prefix=".tmp-", suffix=f".{ext}")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp, path)
        except BaseException:
            os.unlink(tmp)
            raise
        return path

    def load(self, key: int, ext: str = EXT_SOLUTION) -> Optional[str]:
        """Stored history for `key`, or None if missing, empty or corrupted."""
        data = self.read_blob(key, ext)
        if data is None:
            return None
        try:
            history = decode_history(data)
        except CorruptSolutionError as exc:
            logger.warning("ignoring %s: %s", solution_filename(key, ext), exc)
            return None
        return history or None

    def save(self, key: int, history: str, ext: str = EXT_SOLUTION) -> Path:
        path = self.write_blob(key, ext, encode_history(history))
        logger.info("saved %d moves to %s", len(history), path)
        return path

    def load_best(self, crc64: int, crc32_legacy: int) -> Optional[str]:
        """Current-format solution, falling back to one saved under the legacy key."""
        solution = self.load(crc64, EXT_SOLUTION)
        if solution is None:
            solution = self.load(crc32_legacy, EXT_LEGACY)
        return solution
