"""
Stretch catalog request / response schemas.

Field rules (length, allowed priority / category) are NOT enforced here:
they are checked by services/validation.py so that every failing rule is
reported together in one VALIDATION_FAILED response.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class StretchCreateRequest(BaseModel):
    name: str = Field(description="Unique display name (≤ 100 chars).", examples=["Squat Hold"])
    priority: str = Field(description='"high" | "low"', examples=["high"])
    category: str = Field(
        description=(
            '"hips" | "core" | "feet_ankles" | "spine_shoulders" | '
            '"functional" | "mobility" | "flexibility" | "general"'
        ),
        examples=["functional"],
    )
    description: str = Field(description="How to do it (≤ 500 chars).")
    enabled: Optional[bool] = Field(default=None, description="Defaults to true.")


class StretchUpdateRequest(BaseModel):
    """Any subset of fields; omitted fields keep their current value."""
    name: Optional[str] = None
    priority: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    enabled: Optional[bool] = None


class StretchValidateRequest(BaseModel):
    name: Optional[str] = None
    priority: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None


class StretchValidateResponse(BaseModel):
    valid: bool
    errors: list[str]


class StretchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    priority: str
    category: str
    description: str
    enabled: bool


class StretchListResponse(BaseModel):
    total: int
    items: list[StretchResponse]


class StretchDeleteResponse(BaseModel):
    id: int
    history_removed: int = Field(description="Action records deleted with the stretch.")
