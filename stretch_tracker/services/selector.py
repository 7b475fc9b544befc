"""
Selector — picks the next stretch to offer.

Flow
----
  enabled stretches (enabled=None counts as enabled)
    -> none?              EMPTY_CATALOG  (fixed prompt to add stretches)
    -> daily limit gate
    -> none left?         LIMIT_REACHED  (random celebratory message)
    -> weighting engine
    -> one weighted random draw (cumulative distribution inversion)

`select_next` is pure over the snapshots it is given. `select_for_today`
re-reads every store on each call; nothing is cached between requests.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

import structlog

from stretch_tracker.core.types import Action, Preferences, Stretch
from stretch_tracker.services import messages
from stretch_tracker.services.daily_limit import available_today
from stretch_tracker.services.weighting import compute_weights
from stretch_tracker.stores.base import Stores

logger = structlog.get_logger()


class SelectionKind:
    STRETCH       = "stretch"
    EMPTY_CATALOG = "empty_catalog"
    LIMIT_REACHED = "limit_reached"


@dataclass(frozen=True)
class SelectionResult:
    kind: str
    stretch: Optional[Stretch] = None
    title: Optional[str] = None
    message: Optional[str] = None
    probability: Optional[float] = None   # weight of the drawn stretch
    candidates: int = 0                   # stretches that passed the gate


def weighted_index(weights: Sequence[float], rng: Optional[random.Random] = None) -> int:
    """Draw an index from a normalized distribution using one uniform [0, 1) sample."""
    if not weights:
        raise ValueError("weights must not be empty")
    threshold = (rng or random).random()
    cumulative = 0.0
    for index, weight in enumerate(weights):
        cumulative += weight
        if threshold < cumulative:
            return index
    # Float rounding can leave the total a hair under 1.0
    return len(weights) - 1


def select_next(
    stretches: Sequence[Stretch],
    history: Sequence[Action],
    prefs: Preferences,
    today: date,
    rng: Optional[random.Random] = None,
) -> SelectionResult:
    enabled = [s for s in stretches if s.is_enabled]
    if not enabled:
        return SelectionResult(
            kind=SelectionKind.EMPTY_CATALOG,
            title=messages.EMPTY_CATALOG_TITLE,
            message=messages.EMPTY_CATALOG_MESSAGE,
        )

    available = available_today(enabled, history, today)
    if not available:
        return SelectionResult(
            kind=SelectionKind.LIMIT_REACHED,
            title=messages.LIMIT_REACHED_TITLE,
            message=messages.limit_reached_message(rng),
        )

    weights = compute_weights(available, history, prefs, today)
    index = weighted_index(weights, rng)
    return SelectionResult(
        kind=SelectionKind.STRETCH,
        stretch=available[index],
        probability=weights[index],
        candidates=len(available),
    )


def select_for_today(
    stores: Stores,
    today: date,
    rng: Optional[random.Random] = None,
) -> SelectionResult:
    """Load a fresh catalog / history / preferences snapshot and select."""
    result = select_next(
        stretches=stores.catalog.list(),
        history=stores.history.query_all(),
        prefs=stores.preferences.get(),
        today=today,
        rng=rng,
    )
    logger.info(
        "Stretch selected",
        kind=result.kind,
        stretch_id=result.stretch.id if result.stretch else None,
        probability=result.probability,
        candidates=result.candidates,
        today=str(today),
    )
    return result
