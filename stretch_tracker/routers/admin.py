"""
Admin router.

POST /admin/reset   — delete all history and stretches, restore default preferences
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from stretch_tracker.routers.preferences import preferences_to_response
from stretch_tracker.schemas.preferences import ResetResponse
from stretch_tracker.services.catalog import reset_all
from stretch_tracker.stores import Stores, get_stores

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/reset", response_model=ResetResponse, summary="Reset all data")
def reset(stores: Stores = Depends(get_stores)):
    """Irreversible. Action ids keep increasing after a reset."""
    result = reset_all(stores)
    return ResetResponse(
        stretches_removed=result.stretches_removed,
        actions_removed=result.actions_removed,
        preferences=preferences_to_response(stores.preferences.get()),
    )
