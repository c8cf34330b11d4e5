from __future__ import annotations
import argparse
import logging

from tqdm import tqdm

from sokoban_engine.config import load_settings
from sokoban_engine.errors import SokobanError
from sokoban_engine.levels.io import iterate_level_files, load_level_file


def main():
    p = argparse.ArgumentParser(description="Parse every level pack listed in the config")
    p.add_argument("--config", type=str, default="configs/settings.yaml")
    args = p.parse_args()

    cfg = load_settings(args.config)
    logging.basicConfig(level=cfg.log_level, format="%(levelname)s %(name)s: %(message)s")

    packs = list(iterate_level_files(cfg.levels_root, cfg.level_sources))
    levels = 0
    bad = 0
    for path in tqdm(packs, desc="Parsing", unit="pack"):
        try:
            lset = load_level_file(path, max_levels=cfg.max_levels)
        except SokobanError as exc:
            bad += 1
            tqdm.write(f"[skip] {path}: {exc}")
            continue
        levels += len(lset)
    print(f"packs: {len(packs) - bad} valid, {bad} skipped; levels: {levels}")


if __name__ == "__main__":
    main()
