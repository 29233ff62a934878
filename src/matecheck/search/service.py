from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

from matecheck.config import EngineConfig
from matecheck.engine.game import Game
from matecheck.engine.move import Move
from matecheck.engine.position import BLACK, WHITE, Position
from matecheck.engine.rules import in_check, legal_moves
from matecheck.errors import SearchTimeout
from matecheck.eval import evaluate


logger = logging.getLogger(__name__)

INF = 10_000_000
MATE_SCORE = 1_000_000


@dataclass
class SearchStats:
    nodes: int = 0


@dataclass
class SearchResult:
    best_move: Optional[Move]
    score: Optional[int]
    depth: int
    nodes: int
    time_ms: int
    timed_out: bool = False


def mate_score(maximizing: bool, ply: int = 0, mate_distance: bool = False) -> int:
    """Score of a position where the side to move is checkmated.

    White-oriented: negative when White (the maximizing side) is mated. With
    ``mate_distance`` the magnitude shrinks by ``ply`` so nearer mates rank
    higher.
    """
    magnitude = MATE_SCORE - ply if mate_distance else MATE_SCORE
    return -magnitude if maximizing else magnitude


def minimax(
    position: Position,
    depth: int,
    alpha: int,
    beta: int,
    maximizing: bool,
    *,
    ply: int = 0,
    mate_distance: bool = False,
    deadline: Optional[float] = None,
    stats: Optional[SearchStats] = None,
) -> int:
    """Minimax with alpha-beta pruning.

    Args:
        position (Position): Position to score.
        depth (int): Plies left to search.
        alpha (int): Lower bound of the window.
        beta (int): Upper bound of the window.
        maximizing (bool): True when White is to move.
        ply (int): Distance from the root, used only by ``mate_distance``.
        mate_distance (bool): Prefer shorter mates.
        deadline (Optional[float]): ``time.perf_counter()`` value after which
            the search aborts.
        stats (Optional[SearchStats]): Node counter to update.

    Returns:
        int: White-oriented score. ``depth`` plies deep it is the material
        balance; a side with no legal moves scores as mated or as a 0 draw.

    Raises:
        SearchTimeout: If ``deadline`` has passed on entry to a node.
    """
    if deadline is not None and time.perf_counter() >= deadline:
        raise SearchTimeout()
    if stats is not None:
        stats.nodes += 1

    side = WHITE if maximizing else BLACK
    moves = legal_moves(position, side)
    if not moves:
        if in_check(position, side):
            return mate_score(maximizing, ply, mate_distance)
        return 0
    if depth == 0:
        return evaluate(position)

    kwargs = dict(ply=ply + 1, mate_distance=mate_distance, deadline=deadline, stats=stats)
    if maximizing:
        best = -INF
        for mv in moves:
            score = minimax(position.apply(mv), depth - 1, alpha, beta, False, **kwargs)
            if score > best:
                best = score
            if score > alpha:
                alpha = score
            if beta <= alpha:
                break
        return best

    best = INF
    for mv in moves:
        score = minimax(position.apply(mv), depth - 1, alpha, beta, True, **kwargs)
        if score < best:
            best = score
        if score < beta:
            beta = score
        if beta <= alpha:
            break
    return best


class SearchService:
    """Root move selection on top of ``minimax``.

    Depth and timing come from ``EngineConfig`` unless given per call; nothing
    is kept between calls, so one service can serve several games.
    """

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        self.config = config or EngineConfig()

    def best_move(
        self,
        position: Position,
        side: str,
        depth: Optional[int] = None,
        movetime_ms: Optional[int] = None,
    ) -> SearchResult:
        if depth is None:
            depth = self.config.depth
        if movetime_ms is None:
            movetime_ms = self.config.movetime_ms
        if isinstance(depth, bool) or not isinstance(depth, int) or depth < 1:
            raise ValueError("depth must be a positive integer")

        start = time.perf_counter()
        deadline = start + movetime_ms / 1000 if movetime_ms is not None else None
        stats = SearchStats()
        white = side == WHITE

        moves = legal_moves(position, side)
        if not moves:
            score = mate_score(white) if in_check(position, side) else 0
            return SearchResult(None, score, depth, 0, _elapsed_ms(start))

        best: Optional[Move] = None
        best_score: Optional[int] = None
        timed_out = False
        for mv in moves:
            try:
                score = minimax(
                    position.apply(mv),
                    depth - 1,
                    -INF,
                    INF,
                    not white,
                    ply=1,
                    mate_distance=self.config.mate_distance,
                    deadline=deadline,
                    stats=stats,
                )
            except SearchTimeout:
                timed_out = True
                break
            if best_score is None or (score > best_score if white else score < best_score):
                best, best_score = mv, score

        if best is None:
            best = moves[0]
        time_ms = _elapsed_ms(start)
        if timed_out:
            logger.info("search deadline reached after %d ms at depth %d", time_ms, depth)
        logger.debug(
            "search depth=%d nodes=%d score=%s best=%s time_ms=%d",
            depth,
            stats.nodes,
            best_score,
            best.to_uci(),
            time_ms,
        )
        return SearchResult(best, best_score, depth, stats.nodes, time_ms, timed_out)

    def search(
        self, game: Game, depth: Optional[int] = None, movetime_ms: Optional[int] = None
    ) -> SearchResult:
        return self.best_move(game.position, game.side_to_move, depth, movetime_ms)


def best_move(position: Position, side: str, depth: int = 3) -> Optional[Move]:
    """Pick the move for ``side`` by a ``depth``-ply search. ``None`` if there is none."""
    return SearchService().best_move(position, side, depth).best_move


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)
