from __future__ import annotations

import pytest
from pydantic import ValidationError

from matecheck.config import EngineConfig


def test_defaults() -> None:
    cfg = EngineConfig()
    assert cfg.depth == 3
    assert cfg.movetime_ms is None
    assert cfg.mate_distance is False


def test_from_env_reads_prefixed_variables() -> None:
    cfg = EngineConfig.from_env(
        {
            "MATECHECK_DEPTH": "5",
            "MATECHECK_MOVETIME_MS": "250",
            "MATECHECK_MATE_DISTANCE": "true",
            "DEPTH": "1",
        }
    )
    assert cfg.depth == 5
    assert cfg.movetime_ms == 250
    assert cfg.mate_distance is True


def test_from_env_skips_empty_values() -> None:
    assert EngineConfig.from_env({"MATECHECK_DEPTH": ""}).depth == 3


@pytest.mark.parametrize("depth", ["0", "9", "deep"])
def test_from_env_rejects_bad_depth(depth: str) -> None:
    with pytest.raises(ValidationError):
        EngineConfig.from_env({"MATECHECK_DEPTH": depth})


def test_merged_ignores_none_and_validates() -> None:
    cfg = EngineConfig(depth=4).merged(depth=None, movetime_ms=50)
    assert cfg.depth == 4
    assert cfg.movetime_ms == 50
    with pytest.raises(ValidationError):
        cfg.merged(depth=0)
