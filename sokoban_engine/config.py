from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = "~/.local/share/simplesok"
DEFAULT_MAX_LEVELS = 4096
SKIN_FILE = "skin.cfg"


@dataclass
class Settings:
    levels_root: str = "levels"
    level_sources: List[str] = field(default_factory=lambda: ["."])
    data_dir: str = DEFAULT_DATA_DIR
    save_dir: str = DEFAULT_DATA_DIR + "/solved"
    legacy_save_dirs: List[str] = field(default_factory=list)
    max_levels: int = DEFAULT_MAX_LEVELS
    skin: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any]) -> "Settings":
        levels = cfg.get("levels", {}) or {}
        solutions = cfg.get("solutions", {}) or {}
        s = cls()
        s.levels_root = levels.get("root_dir", s.levels_root)
        s.level_sources = list(levels.get("sources", s.level_sources))
        s.max_levels = int(levels.get("max_levels", s.max_levels))
        s.data_dir = cfg.get("data_dir", s.data_dir)
        s.save_dir = solutions.get("save_dir", os.path.join(s.data_dir, "solved"))
        s.legacy_save_dirs = list(solutions.get("legacy_dirs", []) or [])
        s.skin = cfg.get("skin", s.skin)
        s.log_level = str(cfg.get("log_level", s.log_level)).upper()
        if s.max_levels < 1:
            raise ValueError(f"max_levels must be positive, got {s.max_levels}")
        return s.expanded()

    def expanded(self) -> "Settings":
        """Copy with `~` expanded in every path."""
        return Settings(
            levels_root=os.path.expanduser(self.levels_root),
            level_sources=list(self.level_sources),
            data_dir=os.path.expanduser(self.data_dir),
            save_dir=os.path.expanduser(self.save_dir),
            legacy_save_dirs=[os.path.expanduser(d) for d in self.legacy_save_dirs],
            max_levels=self.max_levels,
            skin=self.skin,
            log_level=self.log_level,
        )


def load_settings(path: Optional[str]) -> Settings:
    """Reads settings from a YAML file; a missing file gives the defaults."""
    if path is None or not os.path.exists(path):
        if path is not None:
            logger.warning("config file %s not found, using defaults", path)
        return Settings().expanded()
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"{path}: top level must be a mapping")
    return Settings.from_dict(cfg)


# ---- skin name, kept apart from the settings file

def load_skin(data_dir: str) -> Optional[str]:
    """Configured skin name (first line of skin.cfg), or None."""
    path = Path(data_dir) / SKIN_FILE
    try:
        raw = path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        return None
    name = raw.splitlines()[0].strip() if raw else ""
    return name or None


def save_skin(data_dir: str, name: str) -> None:
    path = Path(data_dir) / SKIN_FILE
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(name, encoding="utf-8")
    except OSError as exc:
        logger.error("failed to write config file %s: %s", path, exc)
        raise
