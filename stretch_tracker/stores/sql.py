"""
SQLAlchemy-backed stores (default backend).

One Session per request; each mutating method commits once. SQLAlchemy
errors other than the handled IntegrityError cases surface as StoreError.

Id assignment
-------------
Stretch ids are max(id) + 1, computed inside the insert transaction. The
primary key is the final guard: if a concurrent writer takes the same id
(or the same name) the commit fails with IntegrityError, the transaction is
rolled back and the insert is retried after re-checking the name.
Action ids come from the database autoincrement.

Daily aggregates are a GROUP BY over stretch_history, never a stored table.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional

import structlog
from sqlalchemy import case, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from stretch_tracker import models
from stretch_tracker.core.errors import DuplicateNameError, StoreError, StretchNotFoundError
from stretch_tracker.core.types import (
    Action,
    ActionType,
    DailyAggregate,
    NewAction,
    NewStretch,
    Preferences,
    Stretch,
)
from stretch_tracker.stores.base import CatalogStore, HistoryStore, PreferenceStore, Stores

logger = structlog.get_logger()

_MAX_INSERT_ATTEMPTS = 5


def _ev(v) -> Any:
    return v.value if hasattr(v, "value") else v


@contextmanager
def _store_errors(db: Session) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Database operation failed", error=str(exc))
        raise StoreError("Database operation failed.", backend="sql") from exc


# ---------------------------------------------------------------------------
# Row -> value conversion
# ---------------------------------------------------------------------------

def _to_stretch(row: models.Stretch) -> Stretch:
    return Stretch(
        id=row.id,
        name=row.name,
        priority=_ev(row.priority),
        category=_ev(row.category),
        description=row.description,
        enabled=row.enabled,
    )


def _to_action(row: models.StretchHistory) -> Action:
    return Action(
        id=row.id,
        stretch_id=row.stretch_id,
        stretch_name=row.stretch_name,
        action=_ev(row.action),
        timestamp=row.timestamp,
        date=row.date,
    )


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class SqlCatalogStore(CatalogStore):

    def __init__(self, db: Session):
        self.db = db

    def _name_taken(self, name: str, exclude_id: Optional[int] = None) -> bool:
        q = self.db.query(models.Stretch.id).filter(models.Stretch.name == name)
        if exclude_id is not None:
            q = q.filter(models.Stretch.id != exclude_id)
        return q.first() is not None

    def list(self) -> list[Stretch]:
        with _store_errors(self.db):
            rows = self.db.query(models.Stretch).order_by(models.Stretch.id).all()
            return [_to_stretch(r) for r in rows]

    def get(self, stretch_id: int) -> Optional[Stretch]:
        with _store_errors(self.db):
            row = self.db.get(models.Stretch, stretch_id)
            return _to_stretch(row) if row is not None else None

    def add(self, new: NewStretch) -> Stretch:
        for attempt in range(1, _MAX_INSERT_ATTEMPTS + 1):
            with _store_errors(self.db):
                if self._name_taken(new.name):
                    raise DuplicateNameError(new.name)
                next_id = (self.db.query(func.max(models.Stretch.id)).scalar() or 0) + 1
                row = models.Stretch(
                    id=next_id,
                    name=new.name,
                    priority=new.priority,
                    category=new.category,
                    description=new.description,
                    enabled=True if new.enabled is None else new.enabled,
                )
                self.db.add(row)
                try:
                    self.db.commit()
                except IntegrityError:
                    # Lost a race on id or name; re-check and try again.
                    self.db.rollback()
                    logger.warning("Stretch insert conflict, retrying", attempt=attempt, stretch_id=next_id)
                    continue
                self.db.refresh(row)
                return _to_stretch(row)
        raise StoreError("Could not allocate a stretch id.", backend="sql")

    def update(self, stretch_id: int, fields: Mapping[str, Any]) -> Stretch:
        with _store_errors(self.db):
            row = self.db.get(models.Stretch, stretch_id)
            if row is None:
                raise StretchNotFoundError(stretch_id)
            if "name" in fields and self._name_taken(fields["name"], exclude_id=stretch_id):
                raise DuplicateNameError(fields["name"])
            for key, value in fields.items():
                setattr(row, key, _ev(value))
            try:
                self.db.commit()
            except IntegrityError as exc:
                self.db.rollback()
                raise DuplicateNameError(fields.get("name", row.name)) from exc
            self.db.refresh(row)
            return _to_stretch(row)

    def delete(self, stretch_id: int) -> int:
        with _store_errors(self.db):
            row = self.db.get(models.Stretch, stretch_id)
            if row is None:
                raise StretchNotFoundError(stretch_id)
            removed = (
                self.db.query(models.StretchHistory)
                .filter(models.StretchHistory.stretch_id == stretch_id)
                .delete(synchronize_session=False)
            )
            self.db.delete(row)
            self.db.commit()
            return removed

    def clear(self) -> int:
        with _store_errors(self.db):
            removed = self.db.query(models.Stretch).delete(synchronize_session=False)
            self.db.commit()
            return removed


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------

class SqlHistoryStore(HistoryStore):

    def __init__(self, db: Session):
        self.db = db

    def append(self, new: NewAction) -> Action:
        with _store_errors(self.db):
            row = models.StretchHistory(
                stretch_id=new.stretch_id,
                stretch_name=new.stretch_name,
                action=new.action,
                timestamp=new.timestamp,
                date=new.date,
            )
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            return _to_action(row)

    def query_by_stretch(self, stretch_id: int) -> list[Action]:
        with _store_errors(self.db):
            rows = (
                self.db.query(models.StretchHistory)
                .filter(models.StretchHistory.stretch_id == stretch_id)
                .order_by(models.StretchHistory.timestamp.desc(), models.StretchHistory.id.desc())
                .all()
            )
            return [_to_action(r) for r in rows]

    def query_all(self) -> list[Action]:
        with _store_errors(self.db):
            rows = (
                self.db.query(models.StretchHistory)
                .order_by(models.StretchHistory.timestamp.desc(), models.StretchHistory.id.desc())
                .all()
            )
            return [_to_action(r) for r in rows]

    def delete_by_stretch(self, stretch_id: int) -> int:
        with _store_errors(self.db):
            removed = (
                self.db.query(models.StretchHistory)
                .filter(models.StretchHistory.stretch_id == stretch_id)
                .delete(synchronize_session=False)
            )
            self.db.commit()
            return removed

    def daily_aggregates(self) -> list[DailyAggregate]:
        h = models.StretchHistory
        with _store_errors(self.db):
            rows = (
                self.db.query(
                    h.date,
                    func.sum(case((h.action == ActionType.completed, 1), else_=0)).label("completed"),
                    func.sum(case((h.action == ActionType.skipped, 1), else_=0)).label("skipped"),
                )
                .group_by(h.date)
                .order_by(h.date)
                .all()
            )
            return [
                DailyAggregate(
                    date=r.date,
                    completed_count=int(r.completed or 0),
                    skipped_count=int(r.skipped or 0),
                )
                for r in rows
            ]

    def clear(self) -> int:
        with _store_errors(self.db):
            removed = self.db.query(models.StretchHistory).delete(synchronize_session=False)
            self.db.commit()
            return removed


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------

class SqlPreferenceStore(PreferenceStore):

    def __init__(self, db: Session):
        self.db = db

    def get(self) -> Preferences:
        with _store_errors(self.db):
            rows = self.db.query(models.UserPreference).all()
            return Preferences.from_mapping({r.key: r.value for r in rows})

    def update(self, fields: Mapping[str, float]) -> Preferences:
        with _store_errors(self.db):
            for key, value in fields.items():
                if key not in Preferences.field_names() or value is None:
                    continue
                # merge() is an upsert keyed on the primary key
                self.db.merge(models.UserPreference(key=key, value=float(value)))
            self.db.commit()
        return self.get()

    def reset(self) -> Preferences:
        with _store_errors(self.db):
            self.db.query(models.UserPreference).delete(synchronize_session=False)
            self.db.commit()
        return Preferences()


def build_stores(db: Session) -> Stores:
    return Stores(
        catalog=SqlCatalogStore(db),
        history=SqlHistoryStore(db),
        preferences=SqlPreferenceStore(db),
    )
