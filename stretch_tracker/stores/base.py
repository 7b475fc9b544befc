"""
Store interfaces consumed by the core services.

Each backend (sql, json, memory) implements all three. Every method
returns fresh value objects from stretch_tracker.core.types; callers never
receive live ORM rows or references into a backend's internal state.
"""
from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from stretch_tracker.core.types import Action, DailyAggregate, NewAction, NewStretch, Preferences, Stretch


class CatalogStore(abc.ABC):

    @abc.abstractmethod
    def list(self) -> list[Stretch]:
        """All stretches ordered by id."""

    @abc.abstractmethod
    def get(self, stretch_id: int) -> Optional[Stretch]:
        ...

    @abc.abstractmethod
    def add(self, new: NewStretch) -> Stretch:
        """
        Store a stretch with id = max(id) + 1 (1 when empty) and enabled
        defaulted to True. Raises DuplicateNameError.
        """

    @abc.abstractmethod
    def update(self, stretch_id: int, fields: Mapping[str, Any]) -> Stretch:
        """Raises StretchNotFoundError or DuplicateNameError (self excluded)."""

    @abc.abstractmethod
    def delete(self, stretch_id: int) -> int:
        """
        Remove the stretch and every history row that references it.
        Returns the number of history rows removed. Raises StretchNotFoundError.
        """

    @abc.abstractmethod
    def clear(self) -> int:
        ...


class HistoryStore(abc.ABC):

    @abc.abstractmethod
    def append(self, new: NewAction) -> Action:
        ...

    @abc.abstractmethod
    def query_by_stretch(self, stretch_id: int) -> list[Action]:
        ...

    @abc.abstractmethod
    def query_all(self) -> list[Action]:
        """Every action, newest first."""

    @abc.abstractmethod
    def delete_by_stretch(self, stretch_id: int) -> int:
        ...

    @abc.abstractmethod
    def daily_aggregates(self) -> list[DailyAggregate]:
        """Per-date completed/skipped counts derived from the log, oldest first."""

    @abc.abstractmethod
    def clear(self) -> int:
        ...


class PreferenceStore(abc.ABC):

    @abc.abstractmethod
    def get(self) -> Preferences:
        """Stored values, with defaults for anything unset."""

    @abc.abstractmethod
    def update(self, fields: Mapping[str, float]) -> Preferences:
        ...

    @abc.abstractmethod
    def reset(self) -> Preferences:
        ...


@dataclass(frozen=True)
class Stores:
    catalog: CatalogStore
    history: HistoryStore
    preferences: PreferenceStore
