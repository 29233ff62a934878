"""Static evaluation.

Pure, deterministic, and side-effect free. Material only: no positional,
mobility, or king-safety terms.
"""

from __future__ import annotations

from typing import Dict, Final

from matecheck.engine.position import (
    BISHOP,
    KING,
    KNIGHT,
    PAWN,
    QUEEN,
    ROOK,
    Position,
    piece_kind,
)


# Material values in centipawns
P_VAL: Final = 100
N_VAL: Final = 320
B_VAL: Final = 330
R_VAL: Final = 500
Q_VAL: Final = 900
K_VAL: Final = 20000

PIECE_VALUES: Final[Dict[int, int]] = {
    PAWN: P_VAL,
    KNIGHT: N_VAL,
    BISHOP: B_VAL,
    ROOK: R_VAL,
    QUEEN: Q_VAL,
    KING: K_VAL,
}


def piece_value(piece: int) -> int:
    return PIECE_VALUES[piece_kind(piece)]


def evaluate(position: Position) -> int:
    """Return the material balance in centipawns, positive favouring White."""
    score = 0
    for p in position.cells:
        if p is None:
            continue
        if p < 6:
            score += PIECE_VALUES[p % 6]
        else:
            score -= PIECE_VALUES[p % 6]
    return score
