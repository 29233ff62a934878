from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from .move import Move


WHITE = "w"
BLACK = "b"

# Piece kinds
PAWN, KNIGHT, BISHOP, ROOK, QUEEN, KING = range(6)

# Piece codes: white 0..5, black 6..11, kind = code % 6
WP, WN, WB, WR, WQ, WK, BP, BN, BB, BR, BQ, BK = range(12)
PIECE_TO_CHAR = {
    WP: "P",
    WN: "N",
    WB: "B",
    WR: "R",
    WQ: "Q",
    WK: "K",
    BP: "p",
    BN: "n",
    BB: "b",
    BR: "r",
    BQ: "q",
    BK: "k",
}
CHAR_TO_PIECE = {v: k for k, v in PIECE_TO_CHAR.items()}
EMPTY_CHAR = "."

INITIAL_ROWS = (
    "rnbqkbnr",
    "pppppppp",
    "........",
    "........",
    "........",
    "........",
    "PPPPPPPP",
    "RNBQKBNR",
)

_PROMO_KIND = {"q": QUEEN, "r": ROOK, "b": BISHOP, "n": KNIGHT}


def opposite(side: str) -> str:
    return BLACK if side == WHITE else WHITE


def make_piece(side: str, kind: int) -> int:
    return kind if side == WHITE else kind + 6


def piece_side(piece: int) -> str:
    return WHITE if piece < 6 else BLACK


def piece_kind(piece: int) -> int:
    return piece % 6


def last_rank(side: str) -> int:
    """Rank index (0-based) on which a pawn of ``side`` promotes."""
    return 7 if side == WHITE else 0


Cells = Tuple[Optional[int], ...]


@dataclass(frozen=True)
class Position:
    """Placement of pieces on the 8x8 board.

    Notes:
    - Squares are 0..63 (a1=0 .. h8=63), rank-major from White's perspective.
    - Value type: ``apply`` returns a fresh position, the receiver never
      changes. Whose turn it is lives with the caller.
    """

    cells: Cells

    def __post_init__(self) -> None:
        if len(self.cells) != 64:
            raise ValueError("position must have 64 cells")

    @classmethod
    def initial(cls) -> "Position":
        """Return the standard chess starting position."""
        return cls.from_rows(INITIAL_ROWS)

    @classmethod
    def empty(cls) -> "Position":
        return cls(cells=(None,) * 64)

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> "Position":
        """Build a position from a board diagram.

        Args:
            rows (Sequence[str]): Eight strings of eight characters, rank 8
                first. Piece letters follow ``PIECE_TO_CHAR``; ``.`` marks an
                empty cell.

        Returns:
            Position: Position drawn by the diagram.

        Raises:
            ValueError: If the diagram is not 8x8 or has an unknown character.
        """
        if len(rows) != 8:
            raise ValueError("board diagram must have 8 rows")
        cells: List[Optional[int]] = [None] * 64
        for row_idx, row in enumerate(rows):
            if len(row) != 8:
                raise ValueError(f"board diagram row {row_idx + 1} must have 8 cells")
            rank_idx = 7 - row_idx
            for file_idx, ch in enumerate(row):
                if ch == EMPTY_CHAR:
                    continue
                if ch not in CHAR_TO_PIECE:
                    raise ValueError(f"invalid piece in board diagram: {ch!r}")
                cells[rank_idx * 8 + file_idx] = CHAR_TO_PIECE[ch]
        return cls(cells=tuple(cells))

    def to_rows(self) -> List[str]:
        """Inverse of ``from_rows``."""
        rows: List[str] = []
        for rank_idx in range(7, -1, -1):
            row = []
            for file_idx in range(8):
                p = self.cells[rank_idx * 8 + file_idx]
                row.append(EMPTY_CHAR if p is None else PIECE_TO_CHAR[p])
            rows.append("".join(row))
        return rows

    def piece_at(self, sq: int) -> Optional[int]:
        return self.cells[sq]

    def pieces(self, side: str) -> Iterator[Tuple[int, int]]:
        """Yield ``(square, piece)`` for every piece of ``side``, a1 first."""
        for sq, p in enumerate(self.cells):
            if p is not None and piece_side(p) == side:
                yield sq, p

    def king_square(self, side: str) -> Optional[int]:
        king = make_piece(side, KING)
        for sq, p in enumerate(self.cells):
            if p == king:
                return sq
        return None

    def apply(self, move: Move) -> "Position":
        """Return a new position with ``move`` played.

        The move is not checked for legality. A pawn that lands on its last
        rank is replaced by ``move.promotion``, or by a queen when no
        promotion was given.

        Raises:
            ValueError: If the origin square is empty.
        """
        mover = self.cells[move.from_sq]
        if mover is None:
            raise ValueError("no piece to move from from_sq")
        cells = list(self.cells)
        cells[move.from_sq] = None
        side = piece_side(mover)
        if piece_kind(mover) == PAWN and move.to_sq // 8 == last_rank(side):
            kind = _PROMO_KIND[move.promotion or "q"]
            cells[move.to_sq] = make_piece(side, kind)
        else:
            cells[move.to_sq] = mover
        return Position(cells=tuple(cells))

    def is_promotion(self, move: Move) -> bool:
        """True if ``move`` takes a pawn to its last rank."""
        mover = self.cells[move.from_sq]
        if mover is None or piece_kind(mover) != PAWN:
            return False
        return move.to_sq // 8 == last_rank(piece_side(mover))
