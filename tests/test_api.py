"""Tests for streakbook.api.app — HTTP surface via FastAPI's TestClient."""

from datetime import date
from unittest.mock import patch

import pytest

from streakbook.ports.habit_store_port import StoreError


@pytest.fixture
def headers(client):
    resp = client.post("/users", json={"display_name": "Alice"})
    assert resp.status_code == 201
    return {"X-User-Id": resp.json()["id"]}


@pytest.fixture
def habit_id(client, headers, clock):
    clock.today = date(2024, 7, 1)
    resp = client.post(
        "/habits",
        json={"title": "Stretch", "description": "ten minutes", "week_days": list(range(7))},
        headers=headers,
    )
    assert resp.status_code == 201
    clock.today = date(2024, 7, 31)
    return resp.json()["id"]


class TestUsers:
    def test_register_and_me(self, client, headers):
        resp = client.get("/me", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["display_name"] == "Alice"

    def test_register_blank_name(self, client):
        resp = client.post("/users", json={"display_name": "   "})
        assert resp.status_code == 400

    def test_missing_header(self, client):
        resp = client.get("/habits")
        assert resp.status_code == 401
        assert resp.json() == {"status_code": 401, "message": "unauthorized"}

    def test_unknown_user(self, client):
        resp = client.get("/habits", headers={"X-User-Id": "nobody"})
        assert resp.status_code == 401


class TestHabits:
    def test_create_and_list(self, client, headers, habit_id):
        resp = client.get("/habits", headers=headers)
        assert resp.status_code == 200
        habits = resp.json()
        assert len(habits) == 1
        assert habits[0] == {
            "id": habit_id,
            "status": 0,
            "title": "Stretch",
            "description": "ten minutes",
            "week_days": [0, 1, 2, 3, 4, 5, 6],
            "start_date": "2024-07-01",
            "end_date": None,
        }

    def test_create_empty_schedule(self, client, headers):
        resp = client.post("/habits", json={"title": "Read", "week_days": []}, headers=headers)
        assert resp.status_code == 400
        assert "at least one day" in resp.json()["message"]

    def test_create_unknown_weekday(self, client, headers):
        resp = client.post("/habits", json={"title": "Read", "week_days": [7]}, headers=headers)
        assert resp.status_code == 400
        assert "unrecognized day" in resp.json()["message"]

    def test_malformed_body(self, client, headers):
        resp = client.post("/habits", json={"week_days": [0]}, headers=headers)
        assert resp.status_code == 400
        assert resp.json()["message"] == "bad request"

    def test_patch_title_and_description(self, client, headers, habit_id):
        assert client.patch(f"/habits/{habit_id}/title", json={"title": "Yoga"}, headers=headers).status_code == 204
        assert client.patch(
            f"/habits/{habit_id}/description", json={"description": "evening"}, headers=headers,
        ).status_code == 204
        habit = client.get("/habits", headers=headers).json()[0]
        assert (habit["title"], habit["description"]) == ("Yoga", "evening")

    def test_patch_invalid_title(self, client, headers, habit_id):
        resp = client.patch(f"/habits/{habit_id}/title", json={"title": " Yoga"}, headers=headers)
        assert resp.status_code == 400
        assert resp.json()["message"] == "title is invalid"

    def test_end(self, client, headers, habit_id):
        assert client.patch(f"/habits/{habit_id}/end", headers=headers).status_code == 204
        assert client.patch(f"/habits/{habit_id}/end", headers=headers).status_code == 204
        habit = client.get("/habits", headers=headers).json()[0]
        assert habit["status"] == 1
        assert habit["end_date"] == "2024-07-31"

    def test_delete(self, client, headers, habit_id):
        assert client.delete(f"/habits/{habit_id}", headers=headers).status_code == 204
        assert client.get("/habits", headers=headers).json() == []
        assert client.delete(f"/habits/{habit_id}", headers=headers).status_code == 404

    def test_other_user_cannot_touch(self, client, habit_id):
        other = {"X-User-Id": client.post("/users", json={"display_name": "Bob"}).json()["id"]}
        assert client.delete(f"/habits/{habit_id}", headers=other).status_code == 404
        assert client.patch(f"/habits/{habit_id}/history", json={"date": "2024-07-30"}, headers=other).status_code == 404


class TestHistory:
    def test_get_history(self, client, headers, habit_id):
        resp = client.get(f"/habits/{habit_id}/history?year=2024&month=7", headers=headers)
        assert resp.status_code == 200
        days = resp.json()
        assert len(days) == 31
        assert days[0] == {"status": 2, "date": "2024-07-01"}
        assert days[-1] == {"status": 3, "date": "2024-07-31"}

    def test_toggle_then_get(self, client, headers, habit_id):
        resp = client.patch(f"/habits/{habit_id}/history", json={"date": "2024-07-30"}, headers=headers)
        assert resp.status_code == 204
        days = client.get(f"/habits/{habit_id}/history?year=2024&month=7", headers=headers).json()
        assert days[29] == {"status": 1, "date": "2024-07-30"}

    def test_set_day(self, client, headers, habit_id):
        for _ in range(2):
            resp = client.put(
                f"/habits/{habit_id}/history", json={"date": "2024-07-31", "done": True}, headers=headers,
            )
            assert resp.status_code == 204
        days = client.get(f"/habits/{habit_id}/history?year=2024&month=7", headers=headers).json()
        assert days[30]["status"] == 1

    def test_toggle_out_of_window(self, client, headers, habit_id):
        resp = client.patch(f"/habits/{habit_id}/history", json={"date": "2024-07-21"}, headers=headers)
        assert resp.status_code == 400
        assert "last 7 days" in resp.json()["message"]

    def test_toggle_bad_date(self, client, headers, habit_id):
        resp = client.patch(f"/habits/{habit_id}/history", json={"date": "yesterday"}, headers=headers)
        assert resp.status_code == 400

    def test_toggle_unpadded_date(self, client, headers, habit_id):
        resp = client.patch(f"/habits/{habit_id}/history", json={"date": "2024-7-30"}, headers=headers)
        assert resp.status_code == 400
        assert "expected YYYY-MM-DD" in resp.json()["message"]

    @pytest.mark.parametrize("query,message", [
        ("year=2023&month=7", "invalid year"),
        ("year=2024&month=0", "invalid month"),
    ])
    def test_invalid_month(self, client, headers, habit_id, query, message):
        resp = client.get(f"/habits/{habit_id}/history?{query}", headers=headers)
        assert resp.status_code == 400
        assert resp.json()["message"] == message

    def test_missing_query(self, client, headers, habit_id):
        resp = client.get(f"/habits/{habit_id}/history", headers=headers)
        assert resp.status_code == 400

    def test_unknown_habit(self, client, headers):
        resp = client.get("/habits/missing/history?year=2024&month=7", headers=headers)
        assert resp.status_code == 404


class TestStorageFailure:
    def test_store_error_is_opaque(self, client, headers, habit_db):
        with patch.object(habit_db, "list_habits", side_effect=StoreError("list_habits failed")):
            resp = client.get("/habits", headers=headers)
        assert resp.status_code == 500
        assert resp.json() == {"status_code": 500, "message": "internal server error"}
