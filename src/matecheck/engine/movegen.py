"""Pseudo-legal move generation.

Moves produced here respect piece geometry and blocking but may leave the
mover's own king attacked; ``rules.legal_moves`` filters those out.
"""

from __future__ import annotations

from typing import List, Optional

from matecheck.errors import MoveListOverflow

from .move import Move
from .position import (
    BISHOP,
    KING,
    KNIGHT,
    PAWN,
    QUEEN,
    ROOK,
    WHITE,
    Position,
    piece_kind,
    piece_side,
)


# Generous bound on moves collected into one list; see MoveListOverflow.
MAX_MOVES = 256

KNIGHT_OFFSETS = ((-1, 2), (1, 2), (-2, 1), (2, 1), (-2, -1), (2, -1), (-1, -2), (1, -2))
KING_OFFSETS = ((-1, -1), (0, -1), (1, -1), (-1, 0), (1, 0), (-1, 1), (0, 1), (1, 1))
ROOK_DIRS = ((-1, 0), (1, 0), (0, -1), (0, 1))
BISHOP_DIRS = ((-1, -1), (1, -1), (-1, 1), (1, 1))
SLIDER_DIRS = {
    ROOK: ROOK_DIRS,
    BISHOP: BISHOP_DIRS,
    QUEEN: ROOK_DIRS + BISHOP_DIRS,
}


def _push(out: List[Move], move: Move, limit: int) -> None:
    if len(out) >= limit:
        raise MoveListOverflow(limit)
    out.append(move)


def piece_moves(
    position: Position,
    sq: int,
    side: str,
    out: Optional[List[Move]] = None,
    limit: int = MAX_MOVES,
) -> List[Move]:
    """Append the pseudo-legal moves of the piece on ``sq`` to ``out``.

    Args:
        position (Position): Position to generate from.
        sq (int): Square holding the piece.
        side (str): Side to move. Only a piece of this side generates moves.
        out (Optional[List[Move]]): List to extend; a new one when omitted.
        limit (int): Capacity of ``out``.

    Returns:
        List[Move]: ``out`` with the new moves appended.

    Raises:
        MoveListOverflow: If ``out`` would grow past ``limit``.
    """
    if out is None:
        out = []
    piece = position.cells[sq]
    if piece is None or piece_side(piece) != side:
        return out

    cells = position.cells
    kind = piece_kind(piece)
    f = sq % 8
    r = sq // 8

    if kind == PAWN:
        # Direction and home rank follow the pawn's own colour
        step = 1 if side == WHITE else -1
        start_rank = 1 if side == WHITE else 6
        tr = r + step
        if 0 <= tr < 8:
            to_sq = tr * 8 + f
            if cells[to_sq] is None:
                _push(out, Move(sq, to_sq), limit)
                if r == start_rank:
                    to2 = (r + 2 * step) * 8 + f
                    if cells[to2] is None:
                        _push(out, Move(sq, to2), limit)
            for df in (-1, 1):
                tf = f + df
                if 0 <= tf < 8:
                    cap = tr * 8 + tf
                    target = cells[cap]
                    if target is not None and piece_side(target) != side:
                        _push(out, Move(sq, cap), limit)
        return out

    if kind == KNIGHT or kind == KING:
        offsets = KNIGHT_OFFSETS if kind == KNIGHT else KING_OFFSETS
        for df, dr in offsets:
            tf = f + df
            tr = r + dr
            if 0 <= tf < 8 and 0 <= tr < 8:
                to_sq = tr * 8 + tf
                target = cells[to_sq]
                if target is None or piece_side(target) != side:
                    _push(out, Move(sq, to_sq), limit)
        return out

    for df, dr in SLIDER_DIRS[kind]:
        tf, tr = f, r
        while True:
            tf += df
            tr += dr
            if not (0 <= tf < 8 and 0 <= tr < 8):
                break
            to_sq = tr * 8 + tf
            target = cells[to_sq]
            if target is None:
                _push(out, Move(sq, to_sq), limit)
                continue
            if piece_side(target) != side:
                _push(out, Move(sq, to_sq), limit)
            break
    return out


def pseudo_legal_moves(position: Position, side: str, limit: int = MAX_MOVES) -> List[Move]:
    """Return pseudo-legal moves for every piece of ``side``, scanned a1..h8."""
    moves: List[Move] = []
    for sq, _ in position.pieces(side):
        piece_moves(position, sq, side, moves, limit)
    return moves
