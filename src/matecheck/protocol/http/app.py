from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field

from .error import (
    exception_handler,
    http_exception_handler,
    illegal_move_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from .session import InMemorySessionStore
from ... import __version__
from ...config import EngineConfig
from ...engine.game import CHECK, CHECKMATE, STALEMATE, Game
from ...engine.move import parse_uci
from ...errors import IllegalMoveError
from ...search.service import SearchResult, SearchService


logger = logging.getLogger(__name__)


class CreateGameResponse(BaseModel):
    game_id: str
    board: List[str]
    side_to_move: str


class MoveRequest(BaseModel):
    move: str = Field(..., description="Move such as e2e4 or e7e8q")


class SearchRequest(BaseModel):
    depth: Optional[int] = Field(default=None, ge=1, le=6)
    movetime_ms: Optional[int] = Field(default=None, ge=1)


class GameState(BaseModel):
    game_id: str
    board: List[str]
    side_to_move: str
    status: str
    legal_moves: List[str]
    in_check: bool
    checkmate: bool
    stalemate: bool
    last_move: Optional[str]
    move_history: List[str]


class AIMoveResponse(BaseModel):
    move: str
    score: Optional[int]
    nodes: int
    depth: int
    time_ms: int
    state: GameState


def create_app(config: Optional[EngineConfig] = None) -> FastAPI:
    app = FastAPI(title="matecheck", version=__version__)

    logging.basicConfig(level=logging.INFO)

    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(IllegalMoveError, illegal_move_handler)
    app.add_exception_handler(Exception, exception_handler)

    engine_config = config if config is not None else EngineConfig.from_env()
    service = SearchService(engine_config)
    store = InMemorySessionStore()
    app.state.store = store
    app.state.config = engine_config

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=CreateGameResponse)
    async def create_game() -> CreateGameResponse:
        game = Game.new()
        game_id = store.create(game)
        logger.info("created game %s", game_id)
        return CreateGameResponse(
            game_id=game_id, board=game.position.to_rows(), side_to_move=game.side_to_move
        )

    @app.delete("/api/games/{game_id}")
    async def delete_game(game_id: str) -> Dict[str, str]:
        if not store.delete(game_id):
            raise HTTPException(status_code=404, detail="game not found")
        return {"status": "deleted"}

    @app.get("/api/games/{game_id}/state", response_model=GameState)
    def get_state(game_id: str) -> GameState:
        with _locked_game(store, game_id) as game:
            return _game_state(game_id, game)

    @app.post("/api/games/{game_id}/move", response_model=GameState)
    def make_move(game_id: str, req: MoveRequest) -> GameState:
        try:
            move = parse_uci(req.move.strip())
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        with _locked_game(store, game_id) as game:
            game.apply_move(move)
            return _game_state(game_id, game)

    @app.post("/api/games/{game_id}/ai-move", response_model=AIMoveResponse)
    def ai_move(game_id: str, req: Optional[SearchRequest] = None) -> AIMoveResponse:
        req = req or SearchRequest()
        with _locked_game(store, game_id) as game:
            if game.is_over():
                raise HTTPException(status_code=409, detail=f"game is over: {game.status()}")
            res = service.search(game, depth=req.depth, movetime_ms=req.movetime_ms)
            if res.best_move is None:
                raise HTTPException(status_code=409, detail="no legal move")
            played = game.apply_move(res.best_move)
            logger.info("game %s: engine played %s", game_id, played.to_uci())
            return AIMoveResponse(
                move=played.to_uci(),
                score=res.score,
                nodes=res.nodes,
                depth=res.depth,
                time_ms=res.time_ms,
                state=_game_state(game_id, game),
            )

    @app.post("/api/games/{game_id}/search")
    def search(game_id: str, req: SearchRequest) -> Dict[str, Any]:
        with _locked_game(store, game_id) as game:
            res = service.search(game, depth=req.depth, movetime_ms=req.movetime_ms)
        return _search_payload(res)

    @app.post("/api/games/{game_id}/undo", response_model=GameState)
    def undo(game_id: str) -> GameState:
        with _locked_game(store, game_id) as game:
            try:
                game.undo_move()
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return _game_state(game_id, game)

    return app


@contextmanager
def _locked_game(store: InMemorySessionStore, game_id: str) -> Iterator[Game]:
    """Yield the game with its lock held; 404 for an unknown id."""
    with store.locked(game_id) as game:
        if game is None:
            raise HTTPException(status_code=404, detail="game not found")
        yield game


def _game_state(game_id: str, game: Game) -> GameState:
    status = game.status()
    last = game.last_move()
    return GameState(
        game_id=game_id,
        board=game.position.to_rows(),
        side_to_move=game.side_to_move,
        status=status,
        legal_moves=[m.to_uci() for m in game.legal_moves()],
        in_check=status in (CHECK, CHECKMATE),
        checkmate=status == CHECKMATE,
        stalemate=status == STALEMATE,
        last_move=last.to_uci() if last else None,
        move_history=game.move_history_uci(),
    )


def _search_payload(res: SearchResult) -> Dict[str, Any]:
    return {
        "best_move": res.best_move.to_uci() if res.best_move else None,
        "score": res.score,
        "nodes": res.nodes,
        "depth": res.depth,
        "time_ms": res.time_ms,
        "timed_out": res.timed_out,
    }


# Default app for non-factory servers
app = create_app()
