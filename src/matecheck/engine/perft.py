from __future__ import annotations

from .position import Position, opposite
from .rules import legal_moves


def perft(position: Position, side: str, depth: int) -> int:
    """Compute perft node count for ``position`` with ``side`` to move.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).

    Promotions count once per pawn move since the generator leaves the piece
    choice to the caller.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0:
        return 1

    moves = legal_moves(position, side)
    if depth == 1:
        return len(moves)
    nodes = 0
    other = opposite(side)
    for m in moves:
        nodes += perft(position.apply(m), other, depth - 1)
    return nodes
