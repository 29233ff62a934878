#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import json
import os
import platform
import sys
from dataclasses import dataclass
from typing import Any, Dict, List

# Ensure `src/` is importable when running directly
SRC_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src")
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from matecheck.engine.game import Game
from matecheck.engine.move import parse_uci
from matecheck.search.service import SearchService


@dataclass
class BenchItem:
    id: str
    moves: List[str]


# Lines reached from the initial position (no FEN: games always start there)
DEFAULT_ITEMS = [
    BenchItem("startpos", []),
    BenchItem("open-game", ["e2e4", "e7e5", "g1f3", "b8c6"]),
    BenchItem("queens-gambit", ["d2d4", "d7d5", "c2c4", "e7e6", "b1c3", "g8f6"]),
    BenchItem("fools-mate-threat", ["f2f3", "e7e5", "g2g4"]),
]


def bench_item(svc: SearchService, item: BenchItem, depth: int) -> Dict[str, Any]:
    game = Game.new()
    for u in item.moves:
        game.apply_move(parse_uci(u))
    res = svc.search(game, depth=depth)
    return {
        "id": item.id,
        "depth": res.depth,
        "best_move": res.best_move.to_uci() if res.best_move else None,
        "score": res.score,
        "nodes": res.nodes,
        "time_ms": res.time_ms,
        "nps": int(res.nodes * 1000 / max(1, res.time_ms)),
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Time the search on a few fixed lines")
    parser.add_argument("--depth", type=int, default=3, help="Search depth (default: 3)")
    parser.add_argument("--out", type=str, default=None, help="Write JSON results here")
    args = parser.parse_args()

    svc = SearchService()
    results = [bench_item(svc, item, args.depth) for item in DEFAULT_ITEMS]
    report = {
        "python": platform.python_version(),
        "depth": args.depth,
        "total_nodes": sum(r["nodes"] for r in results),
        "total_time_ms": sum(r["time_ms"] for r in results),
        "results": results,
    }
    text = json.dumps(report, indent=2)
    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            f.write(text + "\n")
    print(text)


if __name__ == "__main__":
    main()
