"""
Stretch catalog router.

GET    /stretches              — list the catalog (ordered by id)
POST   /stretches              — add a stretch
POST   /stretches/validate     — dry-run the field rules
GET    /stretches/{id}         — one stretch
PUT    /stretches/{id}         — replace any subset of fields
DELETE /stretches/{id}         — delete, cascading to its history
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from stretch_tracker.core.errors import StretchNotFoundError
from stretch_tracker.core.types import Stretch
from stretch_tracker.schemas.common import DUPLICATE, INVALID, NOT_FOUND
from stretch_tracker.schemas.stretch import (
    StretchCreateRequest,
    StretchDeleteResponse,
    StretchListResponse,
    StretchResponse,
    StretchUpdateRequest,
    StretchValidateRequest,
    StretchValidateResponse,
)
from stretch_tracker.services.catalog import create_stretch, delete_stretch, update_stretch
from stretch_tracker.services.validation import validate_stretch
from stretch_tracker.stores import Stores, get_stores

router = APIRouter(prefix="/stretches", tags=["stretches"])


# ---------------------------------------------------------------------------
# Serialization helper
# ---------------------------------------------------------------------------

def stretch_to_response(s: Stretch) -> StretchResponse:
    return StretchResponse(
        id=s.id,
        name=s.name,
        priority=s.priority,
        category=s.category,
        description=s.description,
        enabled=s.is_enabled,
    )


# ---------------------------------------------------------------------------
# Collection
# ---------------------------------------------------------------------------

@router.get("", response_model=StretchListResponse, summary="List all stretches")
def list_stretches(stores: Stores = Depends(get_stores)):
    items = stores.catalog.list()
    return StretchListResponse(
        total=len(items),
        items=[stretch_to_response(s) for s in items],
    )


@router.post(
    "",
    response_model=StretchResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a stretch",
    responses={**DUPLICATE, **INVALID},
)
def add_stretch(payload: StretchCreateRequest, stores: Stores = Depends(get_stores)):
    """
    Add a stretch to the catalog. The id is assigned as `max(id) + 1`.

    All field-rule failures come back together in `details.errors`.
    """
    stretch = create_stretch(
        stores,
        name=payload.name,
        priority=payload.priority,
        category=payload.category,
        description=payload.description,
        enabled=payload.enabled,
    )
    return stretch_to_response(stretch)


@router.post(
    "/validate",
    response_model=StretchValidateResponse,
    summary="Check stretch fields without saving",
)
def validate(payload: StretchValidateRequest):
    result = validate_stretch(payload.name, payload.priority, payload.category, payload.description)
    return StretchValidateResponse(valid=result.valid, errors=result.errors)


# ---------------------------------------------------------------------------
# Item
# ---------------------------------------------------------------------------

@router.get("/{stretch_id}", response_model=StretchResponse, responses=NOT_FOUND)
def get_stretch(stretch_id: int, stores: Stores = Depends(get_stores)):
    stretch = stores.catalog.get(stretch_id)
    if stretch is None:
        raise StretchNotFoundError(stretch_id)
    return stretch_to_response(stretch)


@router.put(
    "/{stretch_id}",
    response_model=StretchResponse,
    summary="Update a stretch",
    responses={**NOT_FOUND, **DUPLICATE, **INVALID},
)
def edit_stretch(
    stretch_id: int,
    payload: StretchUpdateRequest,
    stores: Stores = Depends(get_stores),
):
    """Only the fields present in the body are changed. Name uniqueness excludes this stretch."""
    stretch = update_stretch(stores, stretch_id, payload.model_dump(exclude_unset=True))
    return stretch_to_response(stretch)


@router.delete(
    "/{stretch_id}",
    response_model=StretchDeleteResponse,
    summary="Delete a stretch and its history",
    responses=NOT_FOUND,
)
def remove_stretch(stretch_id: int, stores: Stores = Depends(get_stores)):
    removed = delete_stretch(stores, stretch_id)
    return StretchDeleteResponse(id=stretch_id, history_removed=removed)
