from __future__ import annotations
import argparse
import csv
import logging
import os

from tqdm import tqdm

from sokoban_engine.config import load_settings
from sokoban_engine.errors import InvalidMoveError
from sokoban_engine.levels.io import load_level_file
from sokoban_engine.moves import is_solved, replay
from sokoban_engine.repository import SolutionRepository
from sokoban_engine.state import GameState


def main():
    p = argparse.ArgumentParser(description="Replay stored solutions of a pack and check they solve it")
    p.add_argument("pack", help="level file (.xsb, optionally gzipped)")
    p.add_argument("--config", type=str, default="configs/settings.yaml")
    p.add_argument("--out", default=None, help="optional CSV report")
    args = p.parse_args()

    cfg = load_settings(args.config)
    logging.basicConfig(level=cfg.log_level, format="%(levelname)s %(name)s: %(message)s")

    repo = SolutionRepository(cfg.save_dir, cfg.legacy_save_dirs)
    levels = load_level_file(args.pack, repo, cfg.max_levels)

    rows = []
    for lvl in tqdm(levels, desc="Replaying", unit="level"):
        row = {"level": lvl.number, "id": lvl.level_id, "moves": "", "pushes": "", "status": "unsolved"}
        if lvl.solution:
            state = GameState.from_level(lvl)
            try:
                replay(state, lvl.solution)
            except InvalidMoveError as exc:
                row["status"] = f"invalid: {exc}"
            else:
                row["status"] = "ok" if is_solved(state) else "FAILED"
            row["moves"] = state.move_count
            row["pushes"] = state.push_count
        rows.append(row)

    if args.out:
        out_dir = os.path.dirname(args.out)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        with open(args.out, "w", newline="", encoding="utf-8") as f:
            w = csv.DictWriter(f, fieldnames=["level", "id", "moves", "pushes", "status"])
            w.writeheader()
            for r in rows:
                w.writerow(r)

    failed = [r for r in rows if r["status"] not in ("ok", "unsolved")]
    for r in failed:
        print(f"level {r['level']} [{r['id']}]: {r['status']}")
    print(f"{levels.description or args.pack}: {levels.solved_count}/{len(levels)} solved, {len(failed)} broken")


if __name__ == "__main__":
    main()
