from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


FILES = "abcdefgh"
RANKS = "12345678"
PROMOTION_PIECES = ("q", "r", "b", "n")


@dataclass(frozen=True)
class Move:
    """A from/to square pair, plus the piece a pawn becomes on the last rank.

    Squares run from 0 (a1) to 63 (h8), rank by rank. ``promotion`` is one of
    ``q``, ``r``, ``b``, ``n`` or ``None``; a promoting pawn with no letter
    becomes a queen. Letters are stored lowercase; anything else raises
    ValueError.
    """

    from_sq: int
    to_sq: int
    promotion: Optional[str] = None

    def __post_init__(self) -> None:
        if self.promotion is None:
            return
        if not isinstance(self.promotion, str) or self.promotion.lower() not in PROMOTION_PIECES:
            raise ValueError(f"invalid promotion piece: {self.promotion!r}")
        object.__setattr__(self, "promotion", self.promotion.lower())

    def to_uci(self) -> str:
        """Long algebraic text such as ``e2e4`` or ``e7e8q``."""
        return f"{square_to_str(self.from_sq)}{square_to_str(self.to_sq)}{self.promotion or ''}"

    def with_promotion(self, promotion: Optional[str]) -> "Move":
        return Move(self.from_sq, self.to_sq, promotion)


def parse_uci(text: str) -> Move:
    """Read a move written as two squares and an optional promotion letter.

    Args:
        text (str): ``e2e4``, ``e7e8q`` or ``e7e8Q``.

    Returns:
        Move: The parsed move. Legality is not checked here.

    Raises:
        ValueError: On a bad length, an unknown square or promotion letter.
    """
    if len(text) not in (4, 5):
        raise ValueError(f"invalid move length: {text!r}")
    promotion: Optional[str] = None
    if len(text) == 5:
        promotion = text[4].lower()
        if promotion not in PROMOTION_PIECES:
            raise ValueError(f"invalid promotion piece: {text[4]!r}")
    return Move(str_to_square(text[:2]), str_to_square(text[2:4]), promotion)


def str_to_square(name: str) -> int:
    """``"a1"`` -> 0, ``"h8"`` -> 63; raises ValueError on anything else."""
    if len(name) != 2 or name[0] not in FILES or name[1] not in RANKS:
        raise ValueError(f"invalid square: {name!r}")
    return RANKS.index(name[1]) * 8 + FILES.index(name[0])


def square_to_str(sq: int) -> str:
    if not 0 <= sq < 64:
        raise ValueError(f"invalid square index: {sq}")
    rank, file = divmod(sq, 8)
    return FILES[file] + RANKS[rank]
