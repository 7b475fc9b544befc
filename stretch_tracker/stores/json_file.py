"""
Flat-file backend: the whole dataset in one JSON document.

Every transaction re-reads the file (no cross-request cache) and write
transactions save it back atomically (temp file + os.replace). A failed
operation never reaches the save step, so the file is left untouched.

The whole load -> change -> save cycle runs under an OS file lock on
`<data file>.lock`, so several worker processes (or several
JsonFileDatabase instances) sharing one file never hand out the same id
or overwrite each other's writes.

Document layout:
    {
      "stretches":      [{id, name, priority, category, description, enabled}],
      "actions":        [{id, stretch_id, stretch_name, action, timestamp, date}],
      "preferences":    {key: value},
      "last_action_id": int
    }
"""
from __future__ import annotations

import json
import os
import tempfile
from contextlib import contextmanager
from dataclasses import asdict
from datetime import date, datetime
from pathlib import Path
from typing import Iterator

import structlog
from filelock import FileLock, Timeout

from stretch_tracker.core.errors import StoreError
from stretch_tracker.core.types import Action, Stretch
from stretch_tracker.stores.memory import MemoryDatabase

logger = structlog.get_logger()

DEFAULT_FILENAME = "stretch_tracker.json"
DEFAULT_LOCK_TIMEOUT = 10.0  # seconds


class JsonFileDatabase(MemoryDatabase):

    backend_name = "json"

    def __init__(self, path: str | os.PathLike, lock_timeout: float = DEFAULT_LOCK_TIMEOUT):
        super().__init__()
        self.path = Path(path)
        self.lock_path = self.path.with_name(self.path.name + ".lock")
        self._file_lock = FileLock(str(self.lock_path), timeout=lock_timeout)

    @contextmanager
    def transaction(self, write: bool = False) -> Iterator[MemoryDatabase]:
        with self._lock, self._locked_file():
            self._load()
            yield self
            if write:
                self._save()

    @contextmanager
    def _locked_file(self) -> Iterator[None]:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._file_lock.acquire()
        except Timeout as exc:
            logger.error("Timed out waiting for data file lock", path=str(self.lock_path))
            raise StoreError(f"Data file {self.path} is locked by another process.", backend=self.backend_name) from exc
        except OSError as exc:
            logger.error("Could not lock data file", path=str(self.lock_path), error=str(exc))
            raise StoreError(f"Could not lock data file {self.path}.", backend=self.backend_name) from exc
        try:
            yield
        finally:
            self._file_lock.release()

    # -----------------------------------------------------------------------
    # (de)serialization
    # -----------------------------------------------------------------------

    def _load(self) -> None:
        self.stretches, self.actions, self.preferences = {}, {}, {}
        self.last_action_id = 0
        if not self.path.exists():
            return
        try:
            doc = json.loads(self.path.read_text(encoding="utf-8"))
            for raw in doc.get("stretches", []):
                stretch = Stretch(**raw)
                self.stretches[stretch.id] = stretch
            for raw in doc.get("actions", []):
                action = Action(
                    id=raw["id"],
                    stretch_id=raw["stretch_id"],
                    stretch_name=raw["stretch_name"],
                    action=raw["action"],
                    timestamp=datetime.fromisoformat(raw["timestamp"]),
                    date=date.fromisoformat(raw["date"]),
                )
                self.actions[action.id] = action
            self.preferences = {k: float(v) for k, v in doc.get("preferences", {}).items()}
            self.last_action_id = max(int(doc.get("last_action_id", 0)), max(self.actions, default=0))
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.error("Could not read data file", path=str(self.path), error=str(exc))
            raise StoreError(f"Could not read data file {self.path}.", backend=self.backend_name) from exc

    def _save(self) -> None:
        doc = {
            "stretches": [asdict(self.stretches[k]) for k in sorted(self.stretches)],
            "actions": [
                {
                    **asdict(a),
                    "timestamp": a.timestamp.isoformat(),
                    "date": a.date.isoformat(),
                }
                for a in sorted(self.actions.values(), key=lambda a: a.id)
            ],
            "preferences": self.preferences,
            "last_action_id": self.last_action_id,
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(doc, fh, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            logger.error("Could not write data file", path=str(self.path), error=str(exc))
            raise StoreError(f"Could not write data file {self.path}.", backend=self.backend_name) from exc
