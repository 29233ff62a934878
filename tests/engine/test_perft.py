from __future__ import annotations

import pytest

from matecheck.engine.move import parse_uci
from matecheck.engine.perft import perft
from matecheck.engine.position import BLACK, WHITE, Position


def test_perft_startpos_depths_0_3() -> None:
    p = Position.initial()
    assert perft(p, WHITE, 0) == 1
    assert perft(p, WHITE, 1) == 20
    assert perft(p, WHITE, 2) == 400
    assert perft(p, WHITE, 3) == 8902


def test_perft_after_e4() -> None:
    p = Position.initial().apply(parse_uci("e2e4"))
    assert perft(p, BLACK, 1) == 20
    assert perft(p, BLACK, 2) == 600


def test_perft_rejects_negative_depth() -> None:
    with pytest.raises(ValueError):
        perft(Position.initial(), WHITE, -1)
