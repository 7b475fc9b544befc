"""
Backend selection. The core only ever sees a `Stores` bundle; which
implementation sits behind it is decided here from settings.STORE_BACKEND.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Iterator

from stretch_tracker.core.config import settings
from stretch_tracker.db.base import SessionLocal
from stretch_tracker.stores.base import CatalogStore, HistoryStore, PreferenceStore, Stores
from stretch_tracker.stores.json_file import DEFAULT_FILENAME, JsonFileDatabase
from stretch_tracker.stores.memory import MemoryDatabase
from stretch_tracker.stores import memory, sql

__all__ = [
    "CatalogStore",
    "HistoryStore",
    "PreferenceStore",
    "Stores",
    "get_stores",
]


@lru_cache(maxsize=1)
def _memory_database() -> MemoryDatabase:
    return MemoryDatabase()


@lru_cache(maxsize=1)
def _json_database() -> JsonFileDatabase:
    return JsonFileDatabase(Path(settings.DATA_DIR) / DEFAULT_FILENAME)


def get_stores() -> Iterator[Stores]:
    """FastAPI dependency yielding the configured backend for one request."""
    backend = settings.STORE_BACKEND
    if backend == "sql":
        db = SessionLocal()
        try:
            yield sql.build_stores(db)
        finally:
            db.close()
    elif backend == "json":
        yield memory.build_stores(_json_database())
    else:
        yield memory.build_stores(_memory_database())
