from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.scoring.store import get_store


@pytest.fixture()
def client() -> TestClient:
    get_store().clear()
    return TestClient(app)


def _start(client: TestClient, names: list[str], mode: int | str = "501") -> dict:
    r = client.post("/game/start", json={"player_names": names, "game_mode": mode})
    assert r.status_code == 200, r.text
    return r.json()


def test_root_redirects_browsers_to_docs(client: TestClient) -> None:
    r = client.get("/", headers={"accept": "text/html"}, follow_redirects=False)
    assert r.status_code in {302, 307}, r.text
    assert r.headers["location"] == "/docs"


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_no_game_initially(client: TestClient) -> None:
    r = client.get("/game")
    assert r.status_code == 200
    assert r.json() == {"started": False, "match": None}


def test_start_filters_blank_names(client: TestClient) -> None:
    body = _start(client, ["Alice", " ", "Bob"], 301)
    match = body["match"]
    assert body["started"] is True
    assert [p["name"] for p in match["players"]] == ["Alice", "Bob"]
    assert [p["score"] for p in match["players"]] == [301, 301]
    assert match["game_mode"] == "301"
    assert match["current_player_id"] == "player-0"


def test_start_without_names_is_rejected(client: TestClient) -> None:
    r = client.post("/game/start", json={"player_names": ["", "  "]})
    assert r.status_code == 422


def test_start_with_unknown_mode_is_rejected(client: TestClient) -> None:
    r = client.post("/game/start", json={"player_names": ["A"], "game_mode": "701"})
    assert r.status_code == 422


def test_quick_darts_complete_a_turn(client: TestClient) -> None:
    _start(client, ["A", "B"])
    client.post("/game/dart", json={"value": 20, "multiplier": 3})
    client.post("/game/dart", json={"value": 25, "multiplier": 2})
    r = client.post("/game/dart", json={"value": 0, "multiplier": 0})
    match = r.json()["match"]
    assert match["players"][0]["scores"] == [[60, 50, 0]]
    assert match["players"][0]["score"] == 391
    assert match["current_player_index"] == 1


def test_invalid_quick_dart_is_rejected(client: TestClient) -> None:
    _start(client, ["A"])
    r = client.post("/game/dart", json={"value": 25, "multiplier": 3})
    assert r.status_code == 422
    assert client.get("/game").json()["match"]["players"][0]["current_turn"] == []


def test_free_text_entry(client: TestClient) -> None:
    _start(client, ["A"])
    r = client.post("/game/dart/text", json={"text": "57"})
    body = r.json()
    assert body["accepted"] is True
    assert body["match"]["players"][0]["current_turn"] == [57]

    r = client.post("/game/dart/text", json={"text": "abc"})
    body = r.json()
    assert r.status_code == 200
    assert body["accepted"] is False
    assert body["match"]["players"][0]["current_turn"] == [57]


def test_undo_and_end_turn(client: TestClient) -> None:
    _start(client, ["A", "B"])
    client.post("/game/dart/text", json={"text": "20"})
    client.post("/game/dart/text", json={"text": "19"})
    r = client.post("/game/undo")
    assert r.json()["match"]["players"][0]["current_turn"] == [20]

    r = client.post("/game/end-turn")
    match = r.json()["match"]
    assert match["players"][0]["scores"] == [[20, 0, 0]]
    assert match["players"][0]["score"] == 481
    assert match["current_player_index"] == 1


def test_game_over_and_score_cards(client: TestClient) -> None:
    _start(client, ["Solo"], 301)
    assert client.get("/game/scorecards").status_code == 409

    for text in ("100", "80"):  # 180 reached: turn ends early
        client.post("/game/dart/text", json={"text": text})
    for text in ("60", "21", "40"):
        r = client.post("/game/dart/text", json={"text": text})
    match = r.json()["match"]
    assert match["game_over"] is True
    assert match["winner_id"] == "player-0"

    r = client.post("/game/dart/text", json={"text": "20"})
    assert r.json()["accepted"] is False

    r = client.get("/game/scorecards")
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["winner_id"] == "player-0"
    assert [t["total"] for t in body["cards"][0]["turns"]] == [180, 121]


def test_reset_clears_saved_documents(client: TestClient) -> None:
    started = _start(client, ["A"])
    game = get_store().game()
    # Reloading from the saved documents gives back the running match.
    assert game.load() is not None
    assert client.get("/game").json() == started

    r = client.post("/game/reset")
    assert r.json() == {"started": False, "match": None}
    assert game.load() is None
    assert client.get("/game/scorecards").status_code == 404
