"""
HTTP API tests (FastAPI TestClient).
"""

import pytest
from fastapi.testclient import TestClient

from web.server import DUELS, app


@pytest.fixture
def client():
    DUELS.clear()
    yield TestClient(app)
    DUELS.clear()


@pytest.fixture
def duel(client):
    response = client.post("/api/duels", json={"seed": 42, "opponent": "apprentice"})
    assert response.status_code == 201
    return response.json()["id"]


class TestCreate:

    def test_defaults(self, client):
        response = client.post("/api/duels")
        assert response.status_code == 201
        body = response.json()
        assert body["id"] in DUELS
        assert body["state"]["status"] == "active"
        assert body["state"]["round"] == 1
        assert len(body["state"]["player"]["hand"]) == 3

    def test_options(self, client):
        response = client.post("/api/duels", json={
            "player_name": "Merlin", "opponent": "dark_acolyte", "difficulty": "hard", "seed": "DUEL42",
        })
        state = response.json()["state"]
        assert state["difficulty"] == "hard"
        assert state["player"]["name"] == "Merlin"
        assert state["enemy"]["name"] == "Dark Acolyte"

    def test_unknown_opponent(self, client):
        response = client.post("/api/duels", json={"opponent": "dragon"})
        assert response.status_code == 400
        assert "dragon" in response.json()["error"]

    def test_bad_difficulty(self, client):
        response = client.post("/api/duels", json={"difficulty": "nightmare"})
        assert response.status_code == 400

    def test_bad_json(self, client):
        response = client.post("/api/duels", content=b"{nope", headers={"content-type": "application/json"})
        assert response.status_code == 400

    def test_non_object_body(self, client):
        response = client.post("/api/duels", json=[1, 2])
        assert response.status_code == 400


class TestActions:

    def test_get(self, client, duel):
        response = client.get(f"/api/duels/{duel}")
        assert response.status_code == 200
        assert response.json()["id"] == duel

    def test_unknown_duel(self, client):
        response = client.get("/api/duels/missing")
        assert response.status_code == 404
        assert client.post("/api/duels/missing/skip").status_code == 404

    def test_cast_then_enemy_turn(self, client, duel):
        response = client.post(f"/api/duels/{duel}/cast", json={"hand_index": 0})
        assert response.status_code == 200
        assert response.json()["result"]["action"] == "cast"
        assert response.json()["state"]["is_player_turn"] is False

        response = client.post(f"/api/duels/{duel}/enemy-turn")
        assert response.status_code == 200
        assert response.json()["state"]["round"] == 2

    def test_invalid_hand_index(self, client, duel):
        response = client.post(f"/api/duels/{duel}/cast", json={"hand_index": 9})
        assert response.status_code == 400
        assert response.json()["result"]["success"] is False

    def test_select(self, client, duel):
        response = client.post(f"/api/duels/{duel}/select", json={"hand_index": 1})
        assert response.status_code == 200
        state = response.json()["state"]
        assert state["player"]["selected_spell"] == state["player"]["hand"][1]["id"]

    def test_select_requires_index(self, client, duel):
        assert client.post(f"/api/duels/{duel}/select", json={}).status_code == 400

    def test_enemy_turn_out_of_order(self, client, duel):
        response = client.post(f"/api/duels/{duel}/enemy-turn")
        assert response.status_code == 400
        assert response.json()["result"]["error"] == "Not the enemy's turn"

    def test_punch(self, client, duel):
        response = client.post(f"/api/duels/{duel}/punch")
        assert response.status_code == 200
        assert response.json()["state"]["enemy"]["current_health"] < 100

    def test_discard_requires_spell_id(self, client, duel):
        assert client.post(f"/api/duels/{duel}/discard", json={}).status_code == 400

    def test_discard_gate(self, client, duel):
        client.post(f"/api/duels/{duel}/skip")
        state = client.post(f"/api/duels/{duel}/enemy-turn").json()["state"]
        assert state["awaiting_discard"] is True
        assert state["pending_discard"] == 1

        spell_id = state["player"]["hand"][0]["id"]
        response = client.post(f"/api/duels/{duel}/discard", json={"spell_id": spell_id})
        assert response.status_code == 200
        assert response.json()["state"]["awaiting_discard"] is False
        assert response.json()["state"]["round"] == 2
