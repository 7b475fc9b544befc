"""
Store contract tests. Every test in the parametrized classes runs once per
backend (sql, memory, json) through the `stores` fixture in conftest.py.
"""
import json
import threading
from datetime import date, datetime, time, timedelta, timezone

import pytest
from filelock import FileLock

from stretch_tracker.core.errors import DuplicateNameError, StoreError, StretchNotFoundError
from stretch_tracker.core.types import DailyAggregate, NewAction, NewStretch, Preferences
from stretch_tracker.services.catalog import record_action, reset_all
from stretch_tracker.stores import memory
from stretch_tracker.stores.json_file import JsonFileDatabase

TODAY = date(2026, 3, 10)


def _new_stretch(name="Cat Cow", priority="low", category="spine_shoulders", enabled=None):
    return NewStretch(
        name=name,
        priority=priority,
        category=category,
        description=f"{name} description",
        enabled=enabled,
    )


def _at(days_ago: int = 0, hour: int = 9) -> datetime:
    return datetime.combine(TODAY - timedelta(days=days_ago), time(hour), tzinfo=timezone.utc)


def _append(stores, stretch, action: str, days_ago: int = 0, hour: int = 9):
    ts = _at(days_ago, hour)
    return stores.history.append(NewAction(
        stretch_id=stretch.id,
        stretch_name=stretch.name,
        action=action,
        timestamp=ts,
        date=ts.date(),
    ))


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class TestCatalogStore:

    def test_add_and_get(self, stores):
        added = stores.catalog.add(_new_stretch())
        assert added.id == 1
        assert added.enabled is True

        fetched = stores.catalog.get(added.id)
        assert fetched == added
        assert fetched.priority == "low"
        assert fetched.category == "spine_shoulders"

    def test_get_missing_returns_none(self, stores):
        assert stores.catalog.get(42) is None

    def test_ids_are_max_plus_one(self, stores):
        a = stores.catalog.add(_new_stretch("A"))
        b = stores.catalog.add(_new_stretch("B"))
        c = stores.catalog.add(_new_stretch("C"))
        assert (a.id, b.id, c.id) == (1, 2, 3)

        stores.catalog.delete(b.id)
        assert stores.catalog.add(_new_stretch("D")).id == 4

        stores.catalog.delete(4)
        assert stores.catalog.add(_new_stretch("E")).id == 4

    def test_list_ordered_by_id(self, stores):
        for name in ("Zeta", "Alpha", "Mid"):
            stores.catalog.add(_new_stretch(name))
        assert [s.name for s in stores.catalog.list()] == ["Zeta", "Alpha", "Mid"]
        assert [s.id for s in stores.catalog.list()] == [1, 2, 3]

    def test_duplicate_name_rejected(self, stores):
        stores.catalog.add(_new_stretch("Pigeon"))
        with pytest.raises(DuplicateNameError):
            stores.catalog.add(_new_stretch("Pigeon", priority="high"))
        assert len(stores.catalog.list()) == 1

    def test_explicit_disabled_kept(self, stores):
        added = stores.catalog.add(_new_stretch(enabled=False))
        assert stores.catalog.get(added.id).enabled is False

    def test_update_fields(self, stores):
        added = stores.catalog.add(_new_stretch("Pigeon"))
        updated = stores.catalog.update(added.id, {"priority": "high", "enabled": False})
        assert updated.priority == "high"
        assert updated.enabled is False
        assert updated.name == "Pigeon"
        assert stores.catalog.get(added.id) == updated

    def test_update_own_name_allowed(self, stores):
        added = stores.catalog.add(_new_stretch("Pigeon"))
        assert stores.catalog.update(added.id, {"name": "Pigeon"}).name == "Pigeon"

    def test_update_to_taken_name_rejected(self, stores):
        stores.catalog.add(_new_stretch("Pigeon"))
        other = stores.catalog.add(_new_stretch("Frog"))
        with pytest.raises(DuplicateNameError):
            stores.catalog.update(other.id, {"name": "Pigeon"})
        assert stores.catalog.get(other.id).name == "Frog"

    def test_update_missing(self, stores):
        with pytest.raises(StretchNotFoundError):
            stores.catalog.update(5, {"priority": "high"})

    def test_delete_cascades_history(self, stores):
        keep = stores.catalog.add(_new_stretch("Keep"))
        drop = stores.catalog.add(_new_stretch("Drop"))
        _append(stores, keep, "completed")
        _append(stores, drop, "completed")
        _append(stores, drop, "skipped", days_ago=1)

        assert stores.catalog.delete(drop.id) == 2
        assert stores.catalog.get(drop.id) is None
        assert stores.history.query_by_stretch(drop.id) == []
        assert [a.stretch_id for a in stores.history.query_all()] == [keep.id]

    def test_delete_missing(self, stores):
        with pytest.raises(StretchNotFoundError):
            stores.catalog.delete(99)


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------

class TestHistoryStore:

    def test_append_assigns_increasing_ids(self, stores):
        s = stores.catalog.add(_new_stretch())
        first = _append(stores, s, "skipped", hour=8)
        second = _append(stores, s, "completed", hour=9)
        assert second.id > first.id
        assert second.stretch_name == s.name
        assert second.action == "completed"
        assert second.date == TODAY

    def test_query_all_newest_first(self, stores):
        s = stores.catalog.add(_new_stretch())
        _append(stores, s, "completed", days_ago=2)
        _append(stores, s, "skipped", days_ago=0, hour=7)
        _append(stores, s, "completed", days_ago=0, hour=18)
        _append(stores, s, "completed", days_ago=1)

        rows = stores.history.query_all()
        assert [a.date for a in rows] == [TODAY, TODAY, TODAY - timedelta(days=1), TODAY - timedelta(days=2)]
        assert [a.action for a in rows[:2]] == ["completed", "skipped"]

    def test_query_by_stretch(self, stores):
        a = stores.catalog.add(_new_stretch("A"))
        b = stores.catalog.add(_new_stretch("B"))
        _append(stores, a, "completed")
        _append(stores, b, "skipped")
        _append(stores, b, "completed", hour=10)
        assert [x.action for x in stores.history.query_by_stretch(b.id)] == ["completed", "skipped"]

    def test_delete_by_stretch(self, stores):
        a = stores.catalog.add(_new_stretch("A"))
        _append(stores, a, "completed")
        _append(stores, a, "skipped", days_ago=1)
        assert stores.history.delete_by_stretch(a.id) == 2
        assert stores.history.query_all() == []
        assert stores.catalog.get(a.id) is not None

    def test_daily_aggregates_derived_from_log(self, stores):
        a = stores.catalog.add(_new_stretch("A"))
        b = stores.catalog.add(_new_stretch("B"))
        _append(stores, a, "completed", days_ago=3)
        _append(stores, a, "completed", days_ago=0)
        _append(stores, b, "skipped", days_ago=0, hour=10)
        _append(stores, b, "completed", days_ago=0, hour=11)

        assert stores.history.daily_aggregates() == [
            DailyAggregate(TODAY - timedelta(days=3), 1, 0),
            DailyAggregate(TODAY, 2, 1),
        ]

        stores.catalog.delete(b.id)
        assert stores.history.daily_aggregates() == [
            DailyAggregate(TODAY - timedelta(days=3), 1, 0),
            DailyAggregate(TODAY, 1, 0),
        ]

    def test_recorded_name_survives_rename(self, stores):
        s = stores.catalog.add(_new_stretch("Old"))
        record_action(stores, s.id, "completed", _at())
        stores.catalog.update(s.id, {"name": "New"})
        assert stores.history.query_all()[0].stretch_name == "Old"

    def test_record_action_unknown_stretch(self, stores):
        with pytest.raises(StretchNotFoundError):
            record_action(stores, 404, "completed", _at())
        assert stores.history.query_all() == []


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------

class TestPreferenceStore:

    def test_defaults_when_unset(self, stores):
        assert stores.preferences.get() == Preferences(5, 3, 1, 2, 5)

    def test_update_subset(self, stores):
        prefs = stores.preferences.update({"daily_goal": 8, "recency_weight": 0.5})
        assert prefs.daily_goal == 8
        assert prefs.recency_weight == 0.5
        assert prefs.high_priority_weight == 3
        assert stores.preferences.get() == prefs

    def test_update_overwrites(self, stores):
        stores.preferences.update({"daily_goal": 8})
        stores.preferences.update({"daily_goal": 2})
        assert stores.preferences.get().daily_goal == 2

    def test_unknown_and_none_ignored(self, stores):
        prefs = stores.preferences.update({"theme": 1, "daily_goal": None})
        assert prefs == Preferences()

    def test_reset(self, stores):
        stores.preferences.update({"never_done_bonus": 0})
        assert stores.preferences.reset() == Preferences()
        assert stores.preferences.get() == Preferences()


# ---------------------------------------------------------------------------
# Reset
# ---------------------------------------------------------------------------

class TestResetAll:

    def test_clears_everything(self, stores):
        s = stores.catalog.add(_new_stretch("A"))
        stores.catalog.add(_new_stretch("B"))
        _append(stores, s, "completed")
        stores.preferences.update({"daily_goal": 1})

        result = reset_all(stores)
        assert (result.stretches_removed, result.actions_removed) == (2, 1)
        assert stores.catalog.list() == []
        assert stores.history.query_all() == []
        assert stores.history.daily_aggregates() == []
        assert stores.preferences.get() == Preferences()

        assert stores.catalog.add(_new_stretch("C")).id == 1


# ---------------------------------------------------------------------------
# JSON file backend specifics
# ---------------------------------------------------------------------------

class TestJsonFile:

    def test_data_survives_new_instance(self, tmp_path):
        path = tmp_path / "data.json"
        first = memory.build_stores(JsonFileDatabase(path))
        s = first.catalog.add(_new_stretch("Pigeon"))
        _append(first, s, "completed")
        first.preferences.update({"daily_goal": 3})

        second = memory.build_stores(JsonFileDatabase(path))
        assert [x.name for x in second.catalog.list()] == ["Pigeon"]
        action = second.history.query_all()[0]
        assert action.timestamp == _at()
        assert action.date == TODAY
        assert second.preferences.get().daily_goal == 3

    def test_action_ids_not_reused_after_clear(self, tmp_path):
        path = tmp_path / "data.json"
        stores = memory.build_stores(JsonFileDatabase(path))
        s = stores.catalog.add(_new_stretch())
        first = _append(stores, s, "completed")
        stores.history.clear()

        reopened = memory.build_stores(JsonFileDatabase(path))
        assert _append(reopened, s, "completed").id > first.id

    def test_failed_write_leaves_file_untouched(self, tmp_path):
        path = tmp_path / "data.json"
        stores = memory.build_stores(JsonFileDatabase(path))
        stores.catalog.add(_new_stretch("Pigeon"))
        before = path.read_text(encoding="utf-8")

        with pytest.raises(DuplicateNameError):
            stores.catalog.add(_new_stretch("Pigeon"))
        assert path.read_text(encoding="utf-8") == before

    def test_missing_file_is_empty(self, tmp_path):
        stores = memory.build_stores(JsonFileDatabase(tmp_path / "nope" / "data.json"))
        assert stores.catalog.list() == []
        assert stores.preferences.get() == Preferences()

    def test_document_layout(self, tmp_path):
        path = tmp_path / "data.json"
        stores = memory.build_stores(JsonFileDatabase(path))
        s = stores.catalog.add(_new_stretch("Pigeon"))
        _append(stores, s, "skipped")

        doc = json.loads(path.read_text(encoding="utf-8"))
        assert set(doc) == {"stretches", "actions", "preferences", "last_action_id"}
        assert doc["actions"][0]["date"] == "2026-03-10"
        assert doc["last_action_id"] == 1

    def test_two_instances_never_reuse_ids(self, tmp_path):
        """Two databases on one file stand in for two worker processes."""
        path = tmp_path / "data.json"
        first = memory.build_stores(JsonFileDatabase(path))
        second = memory.build_stores(JsonFileDatabase(path))
        stretch = first.catalog.add(_new_stretch("Shared"))

        def worker(stores, prefix):
            for i in range(15):
                stores.catalog.add(_new_stretch(f"{prefix}-{i}"))
                _append(stores, stretch, "skipped")

        threads = [
            threading.Thread(target=worker, args=(first, "a")),
            threading.Thread(target=worker, args=(second, "b")),
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        reopened = memory.build_stores(JsonFileDatabase(path))
        stretch_ids = [s.id for s in reopened.catalog.list()]
        action_ids = [a.id for a in reopened.history.query_all()]
        assert len(stretch_ids) == 31
        assert sorted(stretch_ids) == list(range(1, 32))
        assert len(action_ids) == 30
        assert len(set(action_ids)) == 30

    def test_held_lock_raises_store_error(self, tmp_path):
        path = tmp_path / "data.json"
        stores = memory.build_stores(JsonFileDatabase(path, lock_timeout=0.1))
        other = FileLock(str(tmp_path / "data.json.lock"))
        other.acquire()
        try:
            with pytest.raises(StoreError):
                stores.catalog.add(_new_stretch("Blocked"))
        finally:
            other.release()
        assert stores.catalog.add(_new_stretch("Unblocked")).id == 1

    @pytest.mark.parametrize("content", ["{not json", '{"stretches": [{"id": 1}]}'])
    def test_corrupt_file_raises_store_error(self, tmp_path, content):
        path = tmp_path / "data.json"
        path.write_text(content, encoding="utf-8")
        stores = memory.build_stores(JsonFileDatabase(path))
        with pytest.raises(StoreError):
            stores.catalog.list()
