"""
Selection router.

GET /selection/next   — weighted-random pick of the next stretch to do
"""
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends

from stretch_tracker.core.clock import local_today
from stretch_tracker.routers.stretches import stretch_to_response
from stretch_tracker.schemas.selection import SelectionResponse
from stretch_tracker.services.selector import select_for_today
from stretch_tracker.stores import Stores, get_stores

router = APIRouter(prefix="/selection", tags=["selection"])


@router.get(
    "/next",
    response_model=SelectionResponse,
    summary="Pick the next stretch",
)
def next_stretch(
    stores: Stores = Depends(get_stores),
    today: date = Depends(local_today),
):
    """
    Draw one stretch from the enabled catalog.

    ### Daily limits (per stretch)
    | Today's history | Offered again? |
    |---|---|
    | completed once | no |
    | skipped twice, never completed | no |
    | nothing, or one skip | yes |

    Survivors are weighted by priority, days since last completion (capped)
    and a bonus for never-done stretches, then one is drawn at random.

    Not an error when nothing can be offered: `kind` is `empty_catalog` or
    `limit_reached` and `message` carries the text to show.
    """
    result = select_for_today(stores, today)
    return SelectionResponse(
        kind=result.kind,
        stretch=stretch_to_response(result.stretch) if result.stretch else None,
        title=result.title,
        message=result.message,
        probability=result.probability,
        candidates=result.candidates,
    )
