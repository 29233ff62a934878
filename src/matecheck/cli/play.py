"""Text-mode game against the engine.

Rendering, move input and the promotion prompt live here; everything about
the rules and the search comes from the engine and search packages.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from ..config import EngineConfig
from ..engine.game import CHECK, CHECKMATE, STALEMATE, Game
from ..engine.move import PROMOTION_PIECES, Move, square_to_str, str_to_square
from ..engine.position import WHITE, Position, opposite
from ..errors import IllegalMoveError
from ..search.service import SearchService


logger = logging.getLogger(__name__)

Reader = Callable[[str], str]
Writer = Callable[[str], None]

SIDE_NAMES = {"w": "White", "b": "Black"}
FILES_LINE = "   a b c d e f g h"

QUIT = "quit"


def render(position: Position) -> str:
    """Draw ``position`` with rank 8 on top and coordinates on every edge."""
    lines: List[str] = [FILES_LINE]
    for row_idx, row in enumerate(position.to_rows()):
        rank = 8 - row_idx
        lines.append(f"{rank}  {' '.join(row)}  {rank}")
    lines.append(FILES_LINE)
    return "\n".join(lines)


def parse_move_input(text: str) -> Optional[Move]:
    """Read ``e2e4``, ``e2 e4`` or ``e7e8q`` typed by a player.

    Whitespace is ignored anywhere. A fifth character is taken as the
    promotion piece when it is one of Q, R, B, N (any case).

    Returns:
        Optional[Move]: Parsed move, or ``None`` if the squares are unreadable.
    """
    compact = "".join(text.split())
    if len(compact) < 4:
        return None
    try:
        from_sq = str_to_square(compact[0:2])
        to_sq = str_to_square(compact[2:4])
    except ValueError:
        return None
    promo = compact[4].lower() if len(compact) >= 5 else None
    if promo not in PROMOTION_PIECES:
        promo = None
    return Move(from_sq, to_sq, promo)


def prompt_promotion(read: Reader) -> str:
    """Ask until the player names Q, R, B or N; returns the lowercase letter."""
    while True:
        answer = read("Promote to (Q/R/B/N): ").strip().lower()
        if answer and answer[0] in PROMOTION_PIECES:
            return answer[0]


def describe_move(move: Move) -> str:
    text = f"{square_to_str(move.from_sq)} -> {square_to_str(move.to_sq)}"
    if move.promotion:
        text += f" (promo {move.promotion.upper()})"
    return text


class PlaySession:
    """One game of a human against the engine over injected text I/O."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        human: str = WHITE,
        read: Reader = input,
        write: Writer = print,
    ) -> None:
        self.config = config or EngineConfig()
        self.human = human
        self.read = read
        self.write = write
        self.game = Game.new()
        self.search = SearchService(self.config)

    def run(self) -> str:
        """Play until the game ends or the player quits.

        Returns:
            str: ``checkmate``, ``stalemate`` or ``quit``.
        """
        human_name = SIDE_NAMES[self.human]
        self.write(f"matecheck: you play {human_name}, depth {self.config.depth}.")
        self.write("Enter moves as e2e4 or e2 e4; type 'quit' to leave.")
        self.write("No castling and no en passant. Pawns promote to Q/R/B/N.\n")
        while True:
            self.write(render(self.game.position))
            status = self.game.status()
            side = self.game.side_to_move
            if status == CHECKMATE:
                self.write(f"Checkmate! {SIDE_NAMES[opposite(side)]} wins.")
                return CHECKMATE
            if status == STALEMATE:
                self.write("Stalemate! The game is drawn.")
                return STALEMATE
            if status == CHECK:
                self.write(f"{SIDE_NAMES[side]} is in check.")

            if side == self.human:
                if not self._human_turn():
                    return QUIT
            else:
                self._engine_turn()

    def _human_turn(self) -> bool:
        """Play one human move; False when the player leaves."""
        while True:
            try:
                line = self.read(f"\nYour move ({SIDE_NAMES[self.human]}): ")
            except EOFError:
                return False
            if line.strip().lower().startswith(QUIT):
                self.write("Leaving the game.")
                return False
            move = parse_move_input(line)
            if move is None:
                self.write("Invalid input. Use e2e4.")
                continue
            if not any(
                lm.from_sq == move.from_sq and lm.to_sq == move.to_sq
                for lm in self.game.legal_moves()
            ):
                self.write("Illegal move. Try again.")
                continue
            if move.promotion is None and self.game.position.is_promotion(move):
                try:
                    move = move.with_promotion(prompt_promotion(self.read))
                except EOFError:
                    return False
            try:
                self.game.apply_move(move)
            except IllegalMoveError:
                self.write("Illegal move. Try again.")
                continue
            return True

    def _engine_turn(self) -> None:
        side_name = SIDE_NAMES[self.game.side_to_move]
        self.write(f"\nEngine ({side_name}) thinking...")
        res = self.search.search(self.game)
        if res.best_move is None:
            # status() already reported the end of the game
            raise RuntimeError("engine asked to move in a finished game")
        played = self.game.apply_move(res.best_move)
        logger.info("engine move %s score=%s nodes=%d", played.to_uci(), res.score, res.nodes)
        self.write(describe_move(played))
