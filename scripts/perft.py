#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import os
import sys
import time

# Allow running this script directly via `python scripts/perft.py`
# by adding `src/` to sys.path.
SRC_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src")
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from matecheck.engine.game import Game
from matecheck.engine.move import parse_uci
from matecheck.engine.perft import perft


def main() -> None:
    parser = argparse.ArgumentParser(description="Count legal move tree leaves from the start")
    parser.add_argument(
        "--moves",
        nargs="*",
        default=[],
        help="Moves played from the initial position first (e.g. e2e4 e7e5)",
    )
    parser.add_argument("--depth", type=int, default=3, help="Perft depth (default: 3)")
    args = parser.parse_args()

    game = Game.new()
    for u in args.moves:
        game.apply_move(parse_uci(u))

    start = time.perf_counter()
    nodes = perft(game.position, game.side_to_move, args.depth)
    dt = time.perf_counter() - start
    print(f"nodes={nodes} depth={args.depth} time_ms={int(dt*1000)} nps={int(nodes/max(dt,1e-9))}")


if __name__ == "__main__":
    main()
