from __future__ import annotations

import threading
from typing import List

from fastapi.testclient import TestClient

from matecheck.config import EngineConfig
from matecheck.engine.position import INITIAL_ROWS
from matecheck.protocol.http.app import create_app


def _client() -> TestClient:
    return TestClient(create_app(EngineConfig(depth=1)))


def _new_game(client: TestClient) -> str:
    r = client.post("/api/games")
    assert r.status_code == 200
    return r.json()["game_id"]


def _play(client: TestClient, game_id: str, moves: List[str]) -> None:
    for u in moves:
        r = client.post(f"/api/games/{game_id}/move", json={"move": u})
        assert r.status_code == 200, r.json()


def test_create_game_and_get_state() -> None:
    client = _client()
    r = client.post("/api/games")
    body = r.json()
    assert body["board"] == list(INITIAL_ROWS)
    assert body["side_to_move"] == "w"

    state = client.get(f"/api/games/{body['game_id']}/state").json()
    assert state["game_id"] == body["game_id"]
    assert state["status"] == "ongoing"
    assert len(state["legal_moves"]) == 20
    assert state["last_move"] is None


def test_unknown_game_is_404() -> None:
    client = _client()
    r = client.get("/api/games/does-not-exist/state")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "not_found"


def test_move_updates_state() -> None:
    client = _client()
    game_id = _new_game(client)
    r = client.post(f"/api/games/{game_id}/move", json={"move": "e2e4"})
    assert r.status_code == 200
    state = r.json()
    assert state["side_to_move"] == "b"
    assert state["last_move"] == "e2e4"
    assert state["board"][4] == "....P..."


def test_bad_notation_and_illegal_moves_are_400() -> None:
    client = _client()
    game_id = _new_game(client)
    r = client.post(f"/api/games/{game_id}/move", json={"move": "e9e4"})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "bad_request"
    r = client.post(f"/api/games/{game_id}/move", json={"move": "e2e5"})
    assert r.status_code == 400
    assert r.json()["error"]["message"] == "illegal move"


def test_ai_move_plays_for_side_to_move() -> None:
    client = _client()
    game_id = _new_game(client)
    _play(client, game_id, ["e2e4"])
    r = client.post(f"/api/games/{game_id}/ai-move", json={"depth": 1})
    assert r.status_code == 200
    body = r.json()
    assert body["depth"] == 1
    assert body["state"]["side_to_move"] == "w"
    assert body["state"]["move_history"] == ["e2e4", body["move"]]


def test_ai_move_without_body_uses_config_depth() -> None:
    client = _client()
    game_id = _new_game(client)
    r = client.post(f"/api/games/{game_id}/ai-move")
    assert r.status_code == 200
    assert r.json()["depth"] == 1


def test_ai_move_after_checkmate_is_conflict() -> None:
    client = _client()
    game_id = _new_game(client)
    _play(client, game_id, ["f2f3", "e7e5", "g2g4", "d8h4"])
    state = client.get(f"/api/games/{game_id}/state").json()
    assert state["checkmate"] and state["in_check"]
    assert state["legal_moves"] == []
    r = client.post(f"/api/games/{game_id}/ai-move", json={"depth": 1})
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "conflict"


def test_search_endpoint_shape() -> None:
    client = _client()
    game_id = _new_game(client)
    r = client.post(f"/api/games/{game_id}/search", json={"depth": 1})
    assert r.status_code == 200
    data = r.json()
    assert {"best_move", "score", "nodes", "depth", "time_ms", "timed_out"} <= data.keys()
    assert data["best_move"] == "b1a3"
    assert data["score"] == 0
    # Searching does not play the move
    state = client.get(f"/api/games/{game_id}/state").json()
    assert state["move_history"] == []


def test_undo_and_delete() -> None:
    client = _client()
    game_id = _new_game(client)
    r = client.post(f"/api/games/{game_id}/undo")
    assert r.status_code == 400
    _play(client, game_id, ["d2d4"])
    r = client.post(f"/api/games/{game_id}/undo")
    assert r.status_code == 200
    assert r.json()["board"] == list(INITIAL_ROWS)

    assert client.delete(f"/api/games/{game_id}").status_code == 200
    assert client.get(f"/api/games/{game_id}/state").status_code == 404
    assert client.delete(f"/api/games/{game_id}").status_code == 404


def test_concurrent_ai_moves_are_serialized() -> None:
    client = _client()
    game_id = _new_game(client)
    barrier = threading.Barrier(2)
    results: List[int] = []

    def worker() -> None:
        barrier.wait()
        r = client.post(f"/api/games/{game_id}/ai-move", json={"depth": 1})
        results.append(r.status_code)

    threads = [threading.Thread(target=worker) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results == [200, 200]
    state = client.get(f"/api/games/{game_id}/state").json()
    assert len(state["move_history"]) == 2
    assert state["side_to_move"] == "w"
    for _ in range(2):
        assert client.post(f"/api/games/{game_id}/undo").status_code == 200
    assert client.get(f"/api/games/{game_id}/state").json()["board"] == list(INITIAL_ROWS)
