"""
Process-local stores.

All three stores share one MemoryDatabase. Every operation runs inside
`MemoryDatabase.transaction()`, which holds a re-entrant lock, so id
assignment and the delete cascade are atomic with respect to other threads.
JsonFileDatabase (stores/json_file.py) reuses these stores and only swaps
the transaction for load-from-file / save-to-file.
"""
from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import replace
from typing import Any, Iterator, Mapping, Optional

from stretch_tracker.core.errors import DuplicateNameError, StretchNotFoundError
from stretch_tracker.core.types import (
    Action,
    DailyAggregate,
    NewAction,
    NewStretch,
    Preferences,
    Stretch,
)
from stretch_tracker.services.stats import aggregate_daily
from stretch_tracker.stores.base import CatalogStore, HistoryStore, PreferenceStore, Stores


def _ev(v) -> Any:
    return v.value if hasattr(v, "value") else v


class MemoryDatabase:
    """The whole dataset as plain dicts of frozen value objects."""

    backend_name = "memory"

    def __init__(self):
        self._lock = threading.RLock()
        self.stretches: dict[int, Stretch] = {}
        self.actions: dict[int, Action] = {}
        self.preferences: dict[str, float] = {}
        self.last_action_id = 0

    @contextmanager
    def transaction(self, write: bool = False) -> Iterator["MemoryDatabase"]:
        with self._lock:
            yield self

    def next_action_id(self) -> int:
        self.last_action_id += 1
        return self.last_action_id


def _newest_first(actions) -> list[Action]:
    return sorted(actions, key=lambda a: (a.timestamp, a.id), reverse=True)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class MemoryCatalogStore(CatalogStore):

    def __init__(self, database: MemoryDatabase):
        self.database = database

    @staticmethod
    def _name_taken(data: MemoryDatabase, name: str, exclude_id: Optional[int] = None) -> bool:
        return any(s.name == name and s.id != exclude_id for s in data.stretches.values())

    def list(self) -> list[Stretch]:
        with self.database.transaction() as data:
            return [data.stretches[k] for k in sorted(data.stretches)]

    def get(self, stretch_id: int) -> Optional[Stretch]:
        with self.database.transaction() as data:
            return data.stretches.get(stretch_id)

    def add(self, new: NewStretch) -> Stretch:
        with self.database.transaction(write=True) as data:
            if self._name_taken(data, new.name):
                raise DuplicateNameError(new.name)
            stretch = Stretch(
                id=max(data.stretches, default=0) + 1,
                name=new.name,
                priority=_ev(new.priority),
                category=_ev(new.category),
                description=new.description,
                enabled=True if new.enabled is None else new.enabled,
            )
            data.stretches[stretch.id] = stretch
            return stretch

    def update(self, stretch_id: int, fields: Mapping[str, Any]) -> Stretch:
        with self.database.transaction(write=True) as data:
            current = data.stretches.get(stretch_id)
            if current is None:
                raise StretchNotFoundError(stretch_id)
            if "name" in fields and self._name_taken(data, fields["name"], exclude_id=stretch_id):
                raise DuplicateNameError(fields["name"])
            updated = replace(current, **{k: _ev(v) for k, v in fields.items()})
            data.stretches[stretch_id] = updated
            return updated

    def delete(self, stretch_id: int) -> int:
        with self.database.transaction(write=True) as data:
            if stretch_id not in data.stretches:
                raise StretchNotFoundError(stretch_id)
            doomed = [k for k, a in data.actions.items() if a.stretch_id == stretch_id]
            for k in doomed:
                del data.actions[k]
            del data.stretches[stretch_id]
            return len(doomed)

    def clear(self) -> int:
        with self.database.transaction(write=True) as data:
            removed = len(data.stretches)
            data.stretches.clear()
            return removed


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------

class MemoryHistoryStore(HistoryStore):

    def __init__(self, database: MemoryDatabase):
        self.database = database

    def append(self, new: NewAction) -> Action:
        with self.database.transaction(write=True) as data:
            action = Action(
                id=data.next_action_id(),
                stretch_id=new.stretch_id,
                stretch_name=new.stretch_name,
                action=_ev(new.action),
                timestamp=new.timestamp,
                date=new.date,
            )
            data.actions[action.id] = action
            return action

    def query_by_stretch(self, stretch_id: int) -> list[Action]:
        with self.database.transaction() as data:
            return _newest_first(a for a in data.actions.values() if a.stretch_id == stretch_id)

    def query_all(self) -> list[Action]:
        with self.database.transaction() as data:
            return _newest_first(data.actions.values())

    def delete_by_stretch(self, stretch_id: int) -> int:
        with self.database.transaction(write=True) as data:
            doomed = [k for k, a in data.actions.items() if a.stretch_id == stretch_id]
            for k in doomed:
                del data.actions[k]
            return len(doomed)

    def daily_aggregates(self) -> list[DailyAggregate]:
        with self.database.transaction() as data:
            return aggregate_daily(data.actions.values())

    def clear(self) -> int:
        with self.database.transaction(write=True) as data:
            removed = len(data.actions)
            data.actions.clear()
            return removed


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------

class MemoryPreferenceStore(PreferenceStore):

    def __init__(self, database: MemoryDatabase):
        self.database = database

    def get(self) -> Preferences:
        with self.database.transaction() as data:
            return Preferences.from_mapping(data.preferences)

    def update(self, fields: Mapping[str, float]) -> Preferences:
        with self.database.transaction(write=True) as data:
            for key, value in fields.items():
                if key in Preferences.field_names() and value is not None:
                    data.preferences[key] = float(value)
            return Preferences.from_mapping(data.preferences)

    def reset(self) -> Preferences:
        with self.database.transaction(write=True) as data:
            data.preferences.clear()
            return Preferences()


def build_stores(database: MemoryDatabase) -> Stores:
    return Stores(
        catalog=MemoryCatalogStore(database),
        history=MemoryHistoryStore(database),
        preferences=MemoryPreferenceStore(database),
    )
