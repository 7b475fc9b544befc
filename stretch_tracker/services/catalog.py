"""
Catalog service: validated stretch CRUD, action recording and full reset.

Public API
----------
create_stretch(stores, ...)                    -> Stretch
update_stretch(stores, stretch_id, fields)     -> Stretch
delete_stretch(stores, stretch_id)             -> int   (history rows removed)
record_action(stores, stretch_id, action, now) -> Action
reset_all(stores)                              -> ResetResult
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

import structlog

from stretch_tracker.core.errors import StretchNotFoundError, ValidationFailedError
from stretch_tracker.core.types import (
    STRETCH_MUTABLE_FIELDS,
    Action,
    ActionType,
    NewAction,
    NewStretch,
    Stretch,
)
from stretch_tracker.services.validation import validate_stretch
from stretch_tracker.stores.base import Stores

logger = structlog.get_logger()


def _ev(v: Any) -> Any:
    """Extract bare value from a str-enum or pass through."""
    return v.value if hasattr(v, "value") else v


def _require_valid(name, priority, category, description) -> None:
    result = validate_stretch(name, priority, category, description)
    if not result.valid:
        raise ValidationFailedError(result.errors)


# ---------------------------------------------------------------------------
# Catalog CRUD
# ---------------------------------------------------------------------------

def create_stretch(
    stores: Stores,
    name: str,
    priority: str,
    category: str,
    description: str,
    enabled: Optional[bool] = None,
) -> Stretch:
    _require_valid(name, priority, category, description)
    stretch = stores.catalog.add(NewStretch(
        name=name,
        priority=_ev(priority),
        category=_ev(category),
        description=description,
        enabled=enabled,
    ))
    logger.info("Stretch added", stretch_id=stretch.id, name=stretch.name)
    return stretch


def update_stretch(stores: Stores, stretch_id: int, fields: Mapping[str, Any]) -> Stretch:
    """Replace any subset of name/priority/category/description/enabled."""
    existing = stores.catalog.get(stretch_id)
    if existing is None:
        raise StretchNotFoundError(stretch_id)

    changes = {
        k: _ev(v) for k, v in fields.items()
        if k in STRETCH_MUTABLE_FIELDS
    }
    merged = {k: getattr(existing, k) for k in STRETCH_MUTABLE_FIELDS}
    merged.update(changes)
    _require_valid(merged["name"], merged["priority"], merged["category"], merged["description"])

    stretch = stores.catalog.update(stretch_id, changes)
    logger.info("Stretch updated", stretch_id=stretch_id, fields=sorted(changes))
    return stretch


def delete_stretch(stores: Stores, stretch_id: int) -> int:
    removed = stores.catalog.delete(stretch_id)
    logger.info("Stretch deleted", stretch_id=stretch_id, history_removed=removed)
    return removed


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------

def record_action(
    stores: Stores,
    stretch_id: int,
    action: ActionType | str,
    now: datetime,
) -> Action:
    """
    Append one completed/skipped record. Timestamp and calendar date come
    from the same `now`, so daily grouping and the gate always agree.
    """
    stretch = stores.catalog.get(stretch_id)
    if stretch is None:
        raise StretchNotFoundError(stretch_id)

    recorded = stores.history.append(NewAction(
        stretch_id=stretch.id,
        stretch_name=stretch.name,
        action=ActionType(_ev(action)).value,
        timestamp=now,
        date=now.date(),
    ))
    logger.info(
        "Action recorded",
        action_id=recorded.id,
        stretch_id=stretch.id,
        action=recorded.action,
        date=str(recorded.date),
    )
    return recorded


# ---------------------------------------------------------------------------
# Reset
# ---------------------------------------------------------------------------

@dataclass
class ResetResult:
    stretches_removed: int
    actions_removed: int


def reset_all(stores: Stores) -> ResetResult:
    """Delete all history and stretches and restore default preferences."""
    actions_removed = stores.history.clear()
    stretches_removed = stores.catalog.clear()
    stores.preferences.reset()
    logger.warning(
        "All data reset",
        stretches_removed=stretches_removed,
        actions_removed=actions_removed,
    )
    return ResetResult(stretches_removed=stretches_removed, actions_removed=actions_removed)
