from __future__ import annotations

import threading
import uuid
from contextlib import contextmanager
from typing import Dict, Iterator, Optional, Tuple

from ...engine.game import Game


class InMemorySessionStore:
    """Thread-safe in-memory store of running games keyed by ``game_id``.

    Each game carries its own lock. Handlers that read or change a game hold
    it through ``locked`` so a search and the move it plays are not
    interleaved with another request on the same game.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._games: Dict[str, Tuple[Game, threading.Lock]] = {}

    def create(self, game: Optional[Game] = None) -> str:
        """Store ``game`` (a new game when omitted) and return its ``game_id``."""
        gid = uuid.uuid4().hex
        with self._lock:
            self._games[gid] = (game if game is not None else Game.new(), threading.Lock())
        return gid

    def get(self, game_id: str) -> Optional[Game]:
        with self._lock:
            entry = self._games.get(game_id)
        return entry[0] if entry else None

    @contextmanager
    def locked(self, game_id: str) -> Iterator[Optional[Game]]:
        """Hold the game's lock for the block; yields ``None`` for an unknown id."""
        with self._lock:
            entry = self._games.get(game_id)
        if entry is None:
            yield None
            return
        game, game_lock = entry
        with game_lock:
            yield game

    def delete(self, game_id: str) -> bool:
        with self._lock:
            return self._games.pop(game_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._games)
