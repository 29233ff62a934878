from __future__ import annotations


class EngineError(Exception):
    """Base class for engine failures."""


class MoveListOverflow(EngineError):
    """A move list grew past its fixed capacity.

    Reachable chess positions never get close to the bound, so this signals a
    sizing bug rather than a game outcome.
    """

    def __init__(self, limit: int) -> None:
        super().__init__(f"move list exceeded capacity of {limit}")
        self.limit = limit


class IllegalMoveError(EngineError, ValueError):
    """Requested move is not legal for the side to move."""


class SearchTimeout(EngineError):
    """Raised inside the search when its deadline has passed."""
