"""Legality filter and attack/check oracle."""

from __future__ import annotations

from typing import List

from .move import Move
from .movegen import piece_moves, pseudo_legal_moves
from .position import Position, opposite


def is_attacked(position: Position, sq: int, by_side: str) -> bool:
    """Return True if some piece of ``by_side`` has a pseudo-legal move onto ``sq``.

    Pawns only threaten occupied squares here since their diagonal moves
    require a victim, which is what matters for a king's square.
    """
    for from_sq, _ in position.pieces(by_side):
        for mv in piece_moves(position, from_sq, by_side):
            if mv.to_sq == sq:
                return True
    return False


def in_check(position: Position, side: str) -> bool:
    """Return True if ``side``'s king is attacked. A missing king counts as check."""
    ksq = position.king_square(side)
    if ksq is None:
        return True
    return is_attacked(position, ksq, opposite(side))


def legal_moves(position: Position, side: str) -> List[Move]:
    """Return the moves of ``side`` that do not leave its own king attacked.

    Each candidate is played on a copy (promotions default to a queen) and
    dropped when the king ends up attacked or missing. Order follows
    generation order.
    """
    legal: List[Move] = []
    for mv in pseudo_legal_moves(position, side):
        if not in_check(position.apply(mv), side):
            legal.append(mv)
    return legal


def has_legal_moves(position: Position, side: str) -> bool:
    for mv in pseudo_legal_moves(position, side):
        if not in_check(position.apply(mv), side):
            return True
    return False


def is_checkmate(position: Position, side: str) -> bool:
    return in_check(position, side) and not has_legal_moves(position, side)


def is_stalemate(position: Position, side: str) -> bool:
    return not in_check(position, side) and not has_legal_moves(position, side)
