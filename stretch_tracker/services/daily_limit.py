"""
Daily Limit Gate — may this stretch be offered again today?

Rules, evaluated on today's records for the stretch only
---------------------------------------------------------
  1. completed at least once today          -> blocked (completed_once_today)
  2. never completed, but offered 2+ times  -> blocked (attempted_twice_not_completed)
  3. no record today                        -> allowed (not_done_today)
  4. anything else (one skip)               -> allowed (within_limits)

Records from earlier days never affect today's answer. `today` is passed in
by the caller; nothing here reads the clock.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Sequence

from stretch_tracker.core.types import Action, ActionType, Stretch


class LimitReason:
    NOT_DONE_TODAY                = "not_done_today"
    WITHIN_LIMITS                 = "within_limits"
    COMPLETED_ONCE_TODAY          = "completed_once_today"
    ATTEMPTED_TWICE_NOT_COMPLETED = "attempted_twice_not_completed"


_MAX_COMPLETIONS_PER_DAY = 1
_MAX_ATTEMPTS_WITHOUT_COMPLETION = 2


@dataclass(frozen=True)
class LimitCheck:
    allowed: bool
    reason: str


def can_offer(stretch_id: int, history: Iterable[Action], today: date) -> LimitCheck:
    """Apply the daily limit rules to one stretch."""
    today_actions = [
        a for a in history
        if a.stretch_id == stretch_id and a.date == today
    ]
    if not today_actions:
        return LimitCheck(allowed=True, reason=LimitReason.NOT_DONE_TODAY)

    completed_today = sum(1 for a in today_actions if a.action == ActionType.completed)
    total_today = len(today_actions)

    if completed_today >= _MAX_COMPLETIONS_PER_DAY:
        return LimitCheck(allowed=False, reason=LimitReason.COMPLETED_ONCE_TODAY)
    if completed_today == 0 and total_today >= _MAX_ATTEMPTS_WITHOUT_COMPLETION:
        return LimitCheck(allowed=False, reason=LimitReason.ATTEMPTED_TWICE_NOT_COMPLETED)
    return LimitCheck(allowed=True, reason=LimitReason.WITHIN_LIMITS)


def available_today(
    stretches: Sequence[Stretch],
    history: Sequence[Action],
    today: date,
) -> list[Stretch]:
    """Stretches that pass the gate, in input order."""
    todays = [a for a in history if a.date == today]
    return [s for s in stretches if can_offer(s.id, todays, today).allowed]
