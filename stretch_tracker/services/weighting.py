"""
Weighting Engine — selection probabilities from priority, recency and novelty.

Per stretch
-----------
  base    = high_priority_weight | low_priority_weight
            (missing / unknown priority is scored as low)
  recency = never_done_bonus                              no history at all
          = min(days_since_last_completed * recency_weight, 10)
          = never_done_bonus * 0.5                        skipped, never completed
  weight  = base * (1 + recency)

Weights are normalized to sum to 1. A zero, NaN or infinite sum (e.g. every
preference set to 0) falls back to a uniform distribution.
"""
from __future__ import annotations

import math
from collections import defaultdict
from datetime import date
from typing import Sequence

import structlog

from stretch_tracker.core.types import Action, ActionType, Preferences, Priority, Stretch

logger = structlog.get_logger()

RECENCY_CAP = 10.0
SKIPPED_ONLY_FACTOR = 0.5


def _base_weight(stretch: Stretch, prefs: Preferences) -> float:
    if stretch.priority == Priority.high:
        return prefs.high_priority_weight
    if stretch.priority != Priority.low:
        logger.warning(
            "Invalid or missing priority, scoring as low",
            stretch_id=stretch.id,
            priority=stretch.priority,
        )
    return prefs.low_priority_weight


def _recency_score(actions: Sequence[Action], prefs: Preferences, today: date) -> float:
    if not actions:
        return prefs.never_done_bonus

    completed_dates = [a.date for a in actions if a.action == ActionType.completed]
    if not completed_dates:
        return prefs.never_done_bonus * SKIPPED_ONLY_FACTOR

    days_since_last = max((today - max(completed_dates)).days, 0)
    return min(days_since_last * prefs.recency_weight, RECENCY_CAP)


def raw_weight(
    stretch: Stretch,
    actions: Sequence[Action],
    prefs: Preferences,
    today: date,
) -> float:
    """Un-normalized score for one stretch given its full action history."""
    return _base_weight(stretch, prefs) * (1 + _recency_score(actions, prefs, today))


def compute_weights(
    stretches: Sequence[Stretch],
    history: Sequence[Action],
    prefs: Preferences,
    today: date,
) -> list[float]:
    """
    Return a probability per stretch, aligned by index with `stretches`.
    Empty input returns an empty list.
    """
    if not stretches:
        return []

    by_stretch: dict[int, list[Action]] = defaultdict(list)
    for action in history:
        by_stretch[action.stretch_id].append(action)

    raw = [raw_weight(s, by_stretch.get(s.id, []), prefs, today) for s in stretches]
    total = sum(raw)

    if total == 0 or not math.isfinite(total):
        logger.warning("Degenerate weight sum, using uniform distribution", total=total, n=len(raw))
        return [1 / len(stretches)] * len(stretches)
    return [w / total for w in raw]
