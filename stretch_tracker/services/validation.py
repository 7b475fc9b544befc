"""
Field rules for stretch add / edit.

All failing rules are reported together (distinct messages, rule order) so
the caller can render a complete error summary in one pass.
"""
from __future__ import annotations

from typing import Any, Optional

from stretch_tracker.core.types import Category, Priority, ValidationResult

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500

_PRIORITIES = {p.value for p in Priority}
_CATEGORIES = {c.value for c in Category}


def _enum_value(v: Any) -> Any:
    return v.value if hasattr(v, "value") else v


def validate_stretch(
    name: Optional[str],
    priority: Optional[str],
    category: Optional[str],
    description: Optional[str],
) -> ValidationResult:
    errors: list[str] = []

    name = name or ""
    if not name.strip():
        errors.append("Stretch name is required")
    if len(name) > NAME_MAX_LENGTH:
        errors.append(f"Stretch name must be {NAME_MAX_LENGTH} characters or fewer")

    if _enum_value(priority) not in _PRIORITIES:
        errors.append("Priority must be 'high' or 'low'")

    if _enum_value(category) not in _CATEGORIES:
        errors.append("Invalid category selected")

    description = description or ""
    if not description.strip():
        errors.append("Description is required")
    if len(description) > DESCRIPTION_MAX_LENGTH:
        errors.append(f"Description must be {DESCRIPTION_MAX_LENGTH} characters or fewer")

    distinct = list(dict.fromkeys(errors))
    return ValidationResult(valid=not distinct, errors=distinct)
