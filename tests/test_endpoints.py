"""
Integration tests for API endpoints using a SQLite DB.

"Now" is pinned to 2026-03-10 09:30 UTC by the client fixture.
"""
import pytest

from stretch_tracker.services import messages

SQUAT_HOLD = {
    "name": "Squat Hold",
    "priority": "high",
    "category": "functional",
    "description": "Sink into a deep squat and hold for 60 seconds",
}


def _create(client, **overrides):
    payload = {**SQUAT_HOLD, **overrides}
    r = client.post("/stretches", json=payload)
    assert r.status_code == 201, r.text
    return r.json()


def _record(client, stretch_id, action="completed"):
    r = client.post("/actions", json={"stretch_id": stretch_id, "action": action})
    assert r.status_code == 201, r.text
    return r.json()


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "ok"
        assert body["store"] == "ok"


class TestStretches:
    def test_create(self, client):
        body = _create(client)
        assert body["id"] == 1
        assert body["name"] == "Squat Hold"
        assert body["enabled"] is True

    def test_create_disabled(self, client):
        assert _create(client, enabled=False)["enabled"] is False

    def test_list_ordered_by_id(self, client):
        _create(client, name="B")
        _create(client, name="A")
        r = client.get("/stretches")
        assert r.status_code == 200
        body = r.json()
        assert body["total"] == 2
        assert [s["name"] for s in body["items"]] == ["B", "A"]

    def test_get_one(self, client):
        created = _create(client)
        r = client.get(f"/stretches/{created['id']}")
        assert r.status_code == 200
        assert r.json() == created

    def test_update_partial(self, client):
        created = _create(client)
        r = client.put(f"/stretches/{created['id']}", json={"priority": "low", "enabled": False})
        assert r.status_code == 200
        body = r.json()
        assert body["priority"] == "low"
        assert body["enabled"] is False
        assert body["description"] == SQUAT_HOLD["description"]

    def test_update_invalid_merged_record(self, client):
        created = _create(client)
        r = client.put(f"/stretches/{created['id']}", json={"category": "legs"})
        assert r.status_code == 422
        assert r.json()["details"]["errors"] == ["Invalid category selected"]

    def test_delete_cascades(self, client):
        created = _create(client)
        _record(client, created["id"], "skipped")
        _record(client, created["id"], "completed")

        r = client.delete(f"/stretches/{created['id']}")
        assert r.status_code == 200
        assert r.json() == {"id": created["id"], "history_removed": 2}

        assert client.get(f"/stretches/{created['id']}").status_code == 404
        assert client.get("/actions").json()["total"] == 0
        assert client.get("/stats/daily").json()["items"] == []

    def test_validate_dry_run(self, client):
        r = client.post("/stretches/validate", json={"name": "", "priority": "high", "category": "hips"})
        assert r.status_code == 200
        body = r.json()
        assert body["valid"] is False
        assert body["errors"] == ["Stretch name is required", "Description is required"]
        assert client.get("/stretches").json()["total"] == 0

    def test_validate_ok(self, client):
        r = client.post("/stretches/validate", json=SQUAT_HOLD)
        assert r.json() == {"valid": True, "errors": []}


class TestSelection:
    def test_empty_catalog(self, client):
        r = client.get("/selection/next")
        assert r.status_code == 200
        body = r.json()
        assert body["kind"] == "empty_catalog"
        assert body["stretch"] is None
        assert body["message"] == messages.EMPTY_CATALOG_MESSAGE

    def test_squat_hold_day(self, client):
        created = _create(client)

        r = client.get("/selection/next")
        body = r.json()
        assert body["kind"] == "stretch"
        assert body["stretch"]["id"] == created["id"]
        assert body["probability"] == pytest.approx(1.0)

        _record(client, created["id"], "completed")

        body = client.get("/selection/next").json()
        assert body["kind"] == "limit_reached"
        assert body["title"] == messages.LIMIT_REACHED_TITLE
        assert body["message"] in messages.LIMIT_REACHED_MESSAGES

    def test_two_skips_block(self, client):
        created = _create(client)
        _record(client, created["id"], "skipped")
        assert client.get("/selection/next").json()["kind"] == "stretch"
        _record(client, created["id"], "skipped")
        assert client.get("/selection/next").json()["kind"] == "limit_reached"

    def test_disabled_never_offered(self, client):
        _create(client, name="Off", enabled=False)
        on = _create(client, name="On")
        for _ in range(10):
            assert client.get("/selection/next").json()["stretch"]["id"] == on["id"]


class TestActions:
    def test_record_uses_pinned_clock(self, client):
        created = _create(client)
        body = _record(client, created["id"])
        assert body["stretch_name"] == "Squat Hold"
        assert body["action"] == "completed"
        assert body["date"] == "2026-03-10"
        assert body["timestamp"].startswith("2026-03-10T09:30:00")

    def test_list_newest_first_and_filter(self, client):
        a = _create(client, name="A")
        b = _create(client, name="B")
        first = _record(client, a["id"], "skipped")
        second = _record(client, b["id"], "completed")

        items = client.get("/actions").json()["items"]
        assert [i["id"] for i in items] == [second["id"], first["id"]]

        only_a = client.get("/actions", params={"stretch_id": a["id"]}).json()
        assert only_a["total"] == 1
        assert only_a["items"][0]["stretch_id"] == a["id"]

    def test_pagination(self, client):
        created = _create(client)
        for _ in range(3):
            _record(client, created["id"], "skipped")
        body = client.get("/actions", params={"limit": 2, "offset": 2}).json()
        assert body["total"] == 3
        assert len(body["items"]) == 1

    def test_name_survives_rename(self, client):
        created = _create(client)
        _record(client, created["id"])
        client.put(f"/stretches/{created['id']}", json={"name": "Deep Squat"})
        assert client.get("/actions").json()["items"][0]["stretch_name"] == "Squat Hold"


class TestStats:
    def test_summary_empty(self, client):
        r = client.get("/stats/summary")
        assert r.status_code == 200
        body = r.json()
        assert body["today"] == "2026-03-10"
        assert body["today_completed"] == 0
        assert body["current_streak"] == 0
        assert body["favorite_stretch"] is None
        assert body["daily_goal"] == 5
        assert body["daily_goal_met"] is False
        assert body["message"] in messages.motivational_pool(0, 0)

    def test_summary_after_activity(self, client):
        a = _create(client, name="A")
        b = _create(client, name="B")
        _record(client, a["id"], "completed")
        _record(client, b["id"], "skipped")
        client.put("/preferences", json={"daily_goal": 1})

        body = client.get("/stats/summary").json()
        assert body["today_completed"] == 1
        assert body["daily_goal_met"] is True
        assert body["current_streak"] == 1
        assert body["total_completed"] == 1
        assert body["total_active_days"] == 1
        assert body["average_daily"] == 1.0
        assert body["favorite_stretch"] == "A"

    def test_daily_and_detailed(self, client):
        a = _create(client, name="A")
        b = _create(client, name="B")
        _record(client, a["id"], "skipped")
        _record(client, a["id"], "completed")
        _record(client, b["id"], "skipped")

        daily = client.get("/stats/daily").json()["items"]
        assert daily == [{
            "date": "2026-03-10",
            "completed_count": 1,
            "skipped_count": 2,
            "total_count": 3,
        }]

        rows = client.get("/stats/detailed").json()["items"]
        assert [r["stretch"] for r in rows] == ["A", "B"]
        assert rows[0]["success_rate_label"] == "50%"
        assert rows[0]["last_done"] == "2026-03-10"
        assert rows[1]["success_rate_label"] == "0%"
        assert rows[1]["last_done"] == "Never"

    def test_progress_weekly_frequency(self, client):
        a = _create(client, name="A")
        _record(client, a["id"], "completed")

        progress = client.get("/stats/progress", params={"days": 3}).json()
        assert progress["days"] == 3
        assert progress["items"] == [
            {"date": "2026-03-08", "completed": 0},
            {"date": "2026-03-09", "completed": 0},
            {"date": "2026-03-10", "completed": 1},
        ]

        assert client.get("/stats/weekly").json()["items"] == [{"week": "2026-W10", "completed": 1}]
        assert client.get("/stats/frequency").json()["items"] == [{"stretch": "A", "completed": 1}]

    def test_progress_window_bounds(self, client):
        assert client.get("/stats/progress", params={"days": 0}).status_code == 422


class TestPreferences:
    def test_defaults(self, client):
        r = client.get("/preferences")
        assert r.status_code == 200
        assert r.json() == {
            "daily_goal": 5,
            "high_priority_weight": 3,
            "low_priority_weight": 1,
            "recency_weight": 2,
            "never_done_bonus": 5,
        }

    def test_partial_update(self, client):
        r = client.put("/preferences", json={"recency_weight": 4})
        assert r.status_code == 200
        assert r.json()["recency_weight"] == 4
        assert r.json()["high_priority_weight"] == 3
        assert client.get("/preferences").json()["recency_weight"] == 4

    def test_negative_rejected(self, client):
        r = client.put("/preferences", json={"daily_goal": -1})
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    @pytest.mark.parametrize("value", ["inf", "-inf", "nan", "Infinity"])
    def test_non_finite_rejected(self, client, value):
        r = client.put("/preferences", json={"high_priority_weight": value})
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"
        assert client.get("/preferences").json()["high_priority_weight"] == 3

    def test_weights_change_probabilities(self, client):
        _create(client, name="High", priority="high")
        _create(client, name="Low", priority="low")
        client.put("/preferences", json={"high_priority_weight": 1, "low_priority_weight": 1})
        assert client.get("/selection/next").json()["probability"] == pytest.approx(0.5)


class TestAdminReset:
    def test_reset(self, client):
        created = _create(client)
        _record(client, created["id"])
        first_action_id = client.get("/actions").json()["items"][0]["id"]
        client.put("/preferences", json={"daily_goal": 9})

        r = client.post("/admin/reset")
        assert r.status_code == 200
        body = r.json()
        assert body["stretches_removed"] == 1
        assert body["actions_removed"] == 1
        assert body["preferences"]["daily_goal"] == 5

        assert client.get("/stretches").json()["total"] == 0
        assert client.get("/selection/next").json()["kind"] == "empty_catalog"

        again = _create(client)
        assert again["id"] == 1
        assert _record(client, again["id"])["id"] > first_action_id
