from __future__ import annotations
import argparse
import logging

from sokoban_engine.config import load_settings
from sokoban_engine.levels.resolve import load_level_by_id
from sokoban_engine.render import dump_level
from sokoban_engine.repository import SolutionRepository


def main():
    p = argparse.ArgumentParser()
    p.add_argument(
        "level_id",
        help="Level id like 'path/to/pack.xsb#3' (1-based).",
    )
    p.add_argument("--config", type=str, default="configs/settings.yaml")
    args = p.parse_args()

    cfg = load_settings(args.config)
    logging.basicConfig(level=cfg.log_level, format="%(levelname)s %(name)s: %(message)s")

    lvl = load_level_by_id(args.level_id, SolutionRepository(cfg.save_dir, cfg.legacy_save_dirs))
    print(dump_level(lvl, lvl.solution), end="")


if __name__ == "__main__":
    main()
