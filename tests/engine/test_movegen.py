from __future__ import annotations

from typing import List

import pytest

from matecheck.engine.move import Move, str_to_square
from matecheck.engine.movegen import MAX_MOVES, piece_moves, pseudo_legal_moves
from matecheck.engine.position import BLACK, WHITE, Position
from matecheck.errors import MoveListOverflow


def targets(p: Position, square: str, side: str) -> set[str]:
    return {m.to_uci()[2:4] for m in piece_moves(p, str_to_square(square), side)}


def board(*rows: str) -> Position:
    # Unlisted ranks at the bottom are empty
    padded: List[str] = list(rows) + ["........"] * (8 - len(rows))
    return Position.from_rows(padded)


def test_start_position_pawn_and_knight_moves() -> None:
    p = Position.initial()
    assert targets(p, "e2", WHITE) == {"e3", "e4"}
    assert targets(p, "g1", WHITE) == {"f3", "h3"}
    assert targets(p, "d7", BLACK) == {"d6", "d5"}
    assert targets(p, "a1", WHITE) == set()
    assert len(pseudo_legal_moves(p, WHITE)) == 20
    assert len(pseudo_legal_moves(p, BLACK)) == 20


def test_pawn_blocked_single_and_double_step() -> None:
    p = board(
        "....k...",
        "........",
        "........",
        "........",
        "...n....",
        "....n...",
        "...PP...",
        "....K...",
    )
    # e2 is blocked outright; d2 gets one step since d4 is occupied
    assert targets(p, "e2", WHITE) == set()
    assert targets(p, "d2", WHITE) == {"d3", "e3"}


def test_pawn_captures_only_enemy_pieces_diagonally() -> None:
    p = board(
        "....k...",
        "........",
        "........",
        "...p.P..",
        "....P...",
        "........",
        "........",
        "....K...",
    )
    assert targets(p, "e4", WHITE) == {"e5", "d5"}
    assert targets(p, "d5", BLACK) == {"d4", "e4"}


def test_pawn_off_start_rank_has_no_double_step() -> None:
    p = board(
        "....k...",
        "........",
        "........",
        "........",
        "........",
        "....P...",
        "........",
        "....K...",
    )
    assert targets(p, "e3", WHITE) == {"e4"}


def test_knight_in_corner_and_friendly_blocking() -> None:
    p = board(
        "....k...",
        "........",
        "........",
        "........",
        "........",
        ".P......",
        "........",
        "N...K...",
    )
    assert targets(p, "a1", WHITE) == {"c2"}


def test_king_adjacent_squares() -> None:
    p = board(
        "....k...",
        "........",
        "........",
        "........",
        "...K....",
        "...P....",
        "........",
        "........",
    )
    assert targets(p, "d4", WHITE) == {"c5", "d5", "e5", "c4", "e4", "c3", "e3"}


def test_rook_stops_on_friend_and_captures_enemy() -> None:
    p = board(
        "....k...",
        "........",
        "........",
        "........",
        "P.......",
        "........",
        "........",
        "R..n.K..",
    )
    assert targets(p, "a1", WHITE) == {"a2", "a3", "b1", "c1", "d1"}


def test_bishop_and_queen_rays_on_open_board() -> None:
    p = board(
        "k.......",
        "........",
        "........",
        "........",
        "...Q....",
        "........",
        "........",
        ".......K",
    )
    # Kings sit off the queen's lines
    assert len(targets(p, "d4", WHITE)) == 27
    p2 = board(
        "k.......",
        "........",
        "........",
        "........",
        "........",
        "........",
        "........",
        "..B....K",
    )
    assert targets(p2, "c1", WHITE) == {"b2", "a3", "d2", "e3", "f4", "g5", "h6"}


def test_piece_of_other_side_generates_nothing() -> None:
    p = Position.initial()
    assert piece_moves(p, str_to_square("e7"), WHITE) == []
    assert piece_moves(p, str_to_square("e4"), WHITE) == []


def test_moves_carry_no_promotion_choice() -> None:
    p = board(
        "k.......",
        "....P...",
        "........",
        "........",
        "........",
        "........",
        "........",
        ".......K",
    )
    assert piece_moves(p, str_to_square("e7"), WHITE) == [
        Move(str_to_square("e7"), str_to_square("e8"))
    ]


def test_overflow_is_fatal_not_truncated() -> None:
    p = board(
        "k.......",
        "........",
        "........",
        "........",
        "...Q....",
        "........",
        "........",
        ".......K",
    )
    with pytest.raises(MoveListOverflow):
        piece_moves(p, str_to_square("d4"), WHITE, limit=5)
    assert MAX_MOVES >= 218
