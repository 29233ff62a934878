"""matecheck: a small chess engine with material evaluation and alpha-beta search.

The five operations below are the surface the play loop, UCI adapter and HTTP
API build on.
"""

from __future__ import annotations

from matecheck.engine.move import Move
from matecheck.engine.position import BLACK, WHITE, Position
from matecheck.engine.rules import in_check, legal_moves
from matecheck.search.service import best_move


__version__ = "0.1.0"

__all__ = [
    "BLACK",
    "WHITE",
    "Move",
    "Position",
    "apply",
    "best_move",
    "in_check",
    "initial_position",
    "legal_moves",
]


def initial_position() -> Position:
    return Position.initial()


def apply(position: Position, move: Move) -> Position:
    """Return ``position`` after ``move``; promotions default to a queen."""
    return position.apply(move)
