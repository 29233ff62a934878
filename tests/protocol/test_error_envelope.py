from __future__ import annotations

from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from matecheck.config import EngineConfig
from matecheck.errors import IllegalMoveError
from matecheck.protocol.http.app import create_app


def test_error_envelope_for_http_exception() -> None:
    app: FastAPI = create_app(EngineConfig(depth=1))

    @app.get("/boom")
    def boom():
        raise HTTPException(status_code=400, detail="oops")

    client = TestClient(app)
    r = client.get("/boom")
    assert r.status_code == 400
    err = r.json()["error"]
    assert err["code"] == "bad_request"
    assert err["message"] == "oops"
    assert err["type"] == "client_error"
    assert err["request_id"] == r.headers["x-request-id"]


def test_illegal_move_error_maps_to_400() -> None:
    app: FastAPI = create_app(EngineConfig(depth=1))

    @app.get("/illegal")
    def illegal():
        raise IllegalMoveError("illegal move")

    r = TestClient(app).get("/illegal")
    assert r.status_code == 400
    assert r.json()["error"]["message"] == "illegal move"


def test_validation_error_envelope() -> None:
    client = TestClient(create_app(EngineConfig(depth=1)))
    game_id = client.post("/api/games").json()["game_id"]
    r = client.post(f"/api/games/{game_id}/search", json={"depth": 0})
    assert r.status_code == 422
    err = r.json()["error"]
    assert err["code"] == "unprocessable_entity"
    assert any(fe["field"].endswith("depth") for fe in err["field_errors"])
