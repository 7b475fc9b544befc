"""
Preferences router.

GET /preferences    — current tuning weights (defaults where unset)
PUT /preferences    — partial update
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from stretch_tracker.core.types import Preferences
from stretch_tracker.schemas.preferences import PreferencesResponse, PreferencesUpdateRequest
from stretch_tracker.stores import Stores, get_stores

router = APIRouter(prefix="/preferences", tags=["preferences"])


def preferences_to_response(p: Preferences) -> PreferencesResponse:
    return PreferencesResponse(**p.as_dict())


@router.get("", response_model=PreferencesResponse, summary="Selection weights")
def get_preferences(stores: Stores = Depends(get_stores)):
    return preferences_to_response(stores.preferences.get())


@router.put("", response_model=PreferencesResponse, summary="Update selection weights")
def update_preferences(payload: PreferencesUpdateRequest, stores: Stores = Depends(get_stores)):
    """Takes effect on the next `GET /selection/next`. Omitted fields are unchanged."""
    updated = stores.preferences.update(payload.model_dump(exclude_none=True))
    return preferences_to_response(updated)
