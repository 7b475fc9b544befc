from typing import Optional

from pydantic import BaseModel, Field


class PreferencesResponse(BaseModel):
    daily_goal: float
    high_priority_weight: float
    low_priority_weight: float
    recency_weight: float
    never_done_bonus: float


class PreferencesUpdateRequest(BaseModel):
    """Partial update; every weight must be a finite, non-negative number."""
    daily_goal: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    high_priority_weight: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    low_priority_weight: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    recency_weight: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    never_done_bonus: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)


class ResetResponse(BaseModel):
    stretches_removed: int
    actions_removed: int
    preferences: PreferencesResponse
