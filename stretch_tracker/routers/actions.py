"""
Action history router.

POST /actions                 — record completed / skipped for a stretch
GET  /actions?stretch_id=N    — history, newest first (optionally one stretch)
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from stretch_tracker.core.clock import local_now
from stretch_tracker.core.types import Action
from stretch_tracker.schemas.action import ActionCreateRequest, ActionListResponse, ActionResponse
from stretch_tracker.schemas.common import NOT_FOUND
from stretch_tracker.services.catalog import record_action
from stretch_tracker.stores import Stores, get_stores

router = APIRouter(prefix="/actions", tags=["actions"])


def _action_to_response(a: Action) -> ActionResponse:
    return ActionResponse(
        id=a.id,
        stretch_id=a.stretch_id,
        stretch_name=a.stretch_name,
        action=a.action,
        timestamp=a.timestamp.isoformat(),
        date=str(a.date),
    )


@router.post(
    "",
    response_model=ActionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a completed or skipped stretch",
    responses=NOT_FOUND,
)
def create_action(
    payload: ActionCreateRequest,
    stores: Stores = Depends(get_stores),
    now: datetime = Depends(local_now),
):
    """
    Append one record. `date` is the calendar day of `timestamp` in the
    configured timezone, the same day the daily limits are evaluated on.
    """
    action = record_action(stores, payload.stretch_id, payload.action, now)
    return _action_to_response(action)


@router.get("", response_model=ActionListResponse, summary="List recorded actions")
def list_actions(
    stretch_id: Optional[int] = Query(default=None, gt=0, description="Only this stretch."),
    limit: int = Query(default=100, ge=1, le=1000, description="Page size."),
    offset: int = Query(default=0, ge=0, description="Skip N items."),
    stores: Stores = Depends(get_stores),
):
    if stretch_id is not None:
        actions = stores.history.query_by_stretch(stretch_id)
    else:
        actions = stores.history.query_all()
    page = actions[offset:offset + limit]
    return ActionListResponse(
        total=len(actions),
        items=[_action_to_response(a) for a in page],
    )
