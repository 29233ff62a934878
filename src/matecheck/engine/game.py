from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from matecheck.errors import IllegalMoveError

from .move import Move
from .position import WHITE, Position, opposite
from .rules import has_legal_moves, in_check, legal_moves


logger = logging.getLogger(__name__)

ONGOING = "ongoing"
CHECK = "check"
CHECKMATE = "checkmate"
STALEMATE = "stalemate"


@dataclass
class Game:
    """Game wrapper around a position with helper operations.

    Responsibility: track position and side to move, expose legal moves,
    apply and undo moves.
    """

    position: Position
    side_to_move: str = WHITE
    move_stack: List[Move] = field(default_factory=list)
    _snapshots: List[Position] = field(default_factory=list, repr=False)

    @classmethod
    def new(cls) -> "Game":
        return cls(position=Position.initial())

    def legal_moves(self) -> List[Move]:
        return legal_moves(self.position, self.side_to_move)

    def resolve_move(self, move: Move) -> Move:
        """Match ``move`` against the legal list and return the move to play.

        Origin and destination select the legal move. On a promoting move the
        requested piece is carried over (queen when omitted).

        Raises:
            IllegalMoveError: If no legal move matches, or a promotion piece is
                given for a move that does not promote.
        """
        for lm in self.legal_moves():
            if lm.from_sq == move.from_sq and lm.to_sq == move.to_sq:
                if self.position.is_promotion(lm):
                    return lm.with_promotion(move.promotion or "q")
                if move.promotion is not None:
                    raise IllegalMoveError("promotion piece given for a non-promoting move")
                return lm
        raise IllegalMoveError("illegal move")

    def apply_move(self, move: Move) -> Move:
        played = self.resolve_move(move)
        after = self.position.apply(played)
        self._snapshots.append(self.position)
        self.position = after
        self.move_stack.append(played)
        logger.debug("%s played %s", self.side_to_move, played.to_uci())
        self.side_to_move = opposite(self.side_to_move)
        return played

    def undo_move(self) -> None:
        if not self.move_stack:
            raise ValueError("no moves to undo")
        self.move_stack.pop()
        self.position = self._snapshots.pop()
        self.side_to_move = opposite(self.side_to_move)

    # --- State flags for protocol ---
    def in_check(self) -> bool:
        return in_check(self.position, self.side_to_move)

    def checkmate(self) -> bool:
        return (not has_legal_moves(self.position, self.side_to_move)) and self.in_check()

    def stalemate(self) -> bool:
        return (not has_legal_moves(self.position, self.side_to_move)) and (not self.in_check())

    def is_over(self) -> bool:
        return not has_legal_moves(self.position, self.side_to_move)

    def status(self) -> str:
        checked = self.in_check()
        if not has_legal_moves(self.position, self.side_to_move):
            return CHECKMATE if checked else STALEMATE
        return CHECK if checked else ONGOING

    def last_move(self) -> Optional[Move]:
        return self.move_stack[-1] if self.move_stack else None

    def move_history_uci(self) -> List[str]:
        return [m.to_uci() for m in self.move_stack]
