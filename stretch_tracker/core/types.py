"""
Plain value types shared by the stores and the core services.

These are what the stores hand out and what the gate / weighting engine /
selector / stats functions consume. No ORM, no Pydantic: every backend
converts its own rows into these so the core never depends on how data is
persisted.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field, fields
from datetime import date as date_type
from datetime import datetime
from typing import Any, Mapping, Optional


class Priority(str, enum.Enum):
    high = "high"
    low = "low"


class Category(str, enum.Enum):
    hips = "hips"
    core = "core"
    feet_ankles = "feet_ankles"
    spine_shoulders = "spine_shoulders"
    functional = "functional"
    mobility = "mobility"
    flexibility = "flexibility"
    general = "general"


class ActionType(str, enum.Enum):
    completed = "completed"
    skipped = "skipped"


# Fields a catalog update may replace (everything but id).
STRETCH_MUTABLE_FIELDS = ("name", "priority", "category", "description", "enabled")


@dataclass(frozen=True)
class Stretch:
    id: int
    name: str
    priority: str
    category: str
    description: str
    # None = record predates the flag; the selector treats it as enabled.
    enabled: Optional[bool] = True

    @property
    def is_enabled(self) -> bool:
        return self.enabled is None or bool(self.enabled)


@dataclass(frozen=True)
class NewStretch:
    """A stretch not yet stored (no id)."""
    name: str
    priority: str
    category: str
    description: str
    enabled: Optional[bool] = None


@dataclass(frozen=True)
class Action:
    id: int
    stretch_id: int
    # Copied at record time; survives later renames and deletes.
    stretch_name: str
    action: str
    timestamp: datetime
    date: date_type


@dataclass(frozen=True)
class NewAction:
    stretch_id: int
    stretch_name: str
    action: str
    timestamp: datetime
    date: date_type


@dataclass(frozen=True)
class DailyAggregate:
    date: date_type
    completed_count: int
    skipped_count: int

    @property
    def total_count(self) -> int:
        return self.completed_count + self.skipped_count


@dataclass(frozen=True)
class Preferences:
    daily_goal: float = 5
    high_priority_weight: float = 3
    low_priority_weight: float = 1
    recency_weight: float = 2
    never_done_bonus: float = 5

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "Preferences":
        """Build from a key/value mapping; unknown keys ignored, missing ones defaulted."""
        known = {k: float(v) for k, v in values.items() if k in cls.field_names() and v is not None}
        return cls(**known)

    def as_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in self.field_names()}


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)
