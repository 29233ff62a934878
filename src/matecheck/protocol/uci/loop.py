from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from ... import __version__
from ...config import EngineConfig
from ...engine.game import Game
from ...engine.move import parse_uci
from ...engine.position import WHITE
from ...search.service import SearchResult, SearchService


logger = logging.getLogger(__name__)

Writer = Callable[[str], None]

MIN_DEPTH = 1
MAX_DEPTH = 8


@dataclass
class GoParams:
    depth: Optional[int] = None
    movetime_ms: Optional[int] = None


class UCIEngine:
    """UCI protocol adapter around the core engine.

    Notes:
    - Searches run synchronously; ``go`` returns after ``bestmove`` is written.
    - Command set: uci, isready, ucinewgame, setoption (Depth), position
      startpos [moves ...], go [depth N] [movetime T], quit.
    - Games always start from the initial position, so ``position fen`` is
      ignored.
    """

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        self.config = config or EngineConfig()
        self.game: Game = Game.new()
        self.search = SearchService(self.config)
        self.depth: int = self.config.depth

    # ---- Command handlers ----
    def cmd_uci(self, write: Writer) -> None:
        write(f"id name matecheck {__version__}")
        write("id author matecheck developers")
        write(f"option name Depth type spin default {self.depth} min {MIN_DEPTH} max {MAX_DEPTH}")
        write("uciok")

    def cmd_isready(self, write: Writer) -> None:
        write("readyok")

    def cmd_ucinewgame(self) -> None:
        self.game = Game.new()

    def cmd_position(self, args: List[str]) -> None:
        # position startpos [moves m1 m2 ...]
        if not args or args[0] != "startpos":
            logger.info("unsupported position command ignored: %s", " ".join(args))
            return
        game = Game.new()
        if len(args) > 1 and args[1] == "moves":
            for u in args[2:]:
                try:
                    game.apply_move(parse_uci(u))
                except ValueError:
                    # Stop at the first invalid/illegal move per typical UCI robustness
                    logger.info("stopping at invalid move %r", u)
                    break
        self.game = game

    def cmd_setoption(self, args: List[str]) -> None:
        # setoption name <name> [value <value>]
        if not args or args[0] != "name":
            return
        try:
            split = args.index("value")
        except ValueError:
            return
        name = " ".join(args[1:split]).strip().lower()
        value = " ".join(args[split + 1 :]).strip()
        if name == "depth":
            try:
                d = int(value)
            except ValueError:
                return
            self.depth = max(MIN_DEPTH, min(MAX_DEPTH, d))

    def cmd_go(self, args: List[str], write: Writer) -> None:
        params = self._parse_go_args(args)
        depth = params.depth or self.depth
        res = self.search.search(self.game, depth=depth, movetime_ms=params.movetime_ms)
        self._emit_info(res, write)
        best = res.best_move.to_uci() if res.best_move else "(none)"
        write(f"bestmove {best}")

    # ---- Utilities ----
    def _parse_go_args(self, args: List[str]) -> GoParams:
        gp = GoParams()
        i = 0
        while i < len(args):
            tok = args[i]
            if tok in ("depth", "movetime") and i + 1 < len(args):
                try:
                    val = int(args[i + 1])
                except ValueError:
                    val = 0
                if val > 0:
                    if tok == "depth":
                        gp.depth = min(MAX_DEPTH, val)
                    else:
                        gp.movetime_ms = val
                i += 2
                continue
            # Ignore unsupported time controls
            i += 1
        return gp

    def _emit_info(self, res: SearchResult, write: Writer) -> None:
        # Scores are White-oriented internally; UCI reports from the mover's view
        score = res.score or 0
        if self.game.side_to_move != WHITE:
            score = -score
        write(f"info depth {res.depth} score cp {score} nodes {res.nodes} time {res.time_ms}")


def _default_writer(line: str) -> None:
    sys.stdout.write(line + "\n")
    sys.stdout.flush()


def run_uci(
    lines: Optional[Iterable[str]] = None,
    write: Writer = _default_writer,
    config: Optional[EngineConfig] = None,
) -> None:
    eng = UCIEngine(config)
    for raw in lines if lines is not None else sys.stdin:
        line = raw.strip()
        if not line:
            continue
        parts = line.split()
        cmd, args = parts[0], parts[1:]

        if cmd == "uci":
            eng.cmd_uci(write)
        elif cmd == "isready":
            eng.cmd_isready(write)
        elif cmd == "setoption":
            eng.cmd_setoption(args)
        elif cmd == "ucinewgame":
            eng.cmd_ucinewgame()
        elif cmd == "position":
            eng.cmd_position(args)
        elif cmd == "go":
            eng.cmd_go(args, write)
        elif cmd == "quit":
            break
        # Ignore unknown commands per UCI convention
