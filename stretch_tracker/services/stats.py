"""
Stats Aggregator — progress numbers derived from the action history.

Everything here is a pure function over store snapshots. `daily` is a list
of DailyAggregate rows (one per date that has any action), `history` is
the raw Action log. Dates are compared to an explicit `today`.

Streak policy
-------------
The streak counts consecutive calendar days with at least one completion,
ending at `today`, or at yesterday while nothing is completed yet today
(so a running streak is not shown as 0 before the first stretch of the
day). A date with no row at all counts as zero, so a missing day breaks
the streak (the rows are NOT just sorted and scanned).

Favorite tie-break
------------------
Ties go to the stretch name whose first completion is oldest.
"""
from __future__ import annotations

import random
from collections import Counter, defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from stretch_tracker.core.types import Action, ActionType, DailyAggregate, Preferences, Stretch
from stretch_tracker.services.messages import motivational_pool

NEVER = "Never"


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StretchStatsRow:
    stretch_id: int
    stretch: str
    completed: int
    skipped: int
    total: int
    success_rate: float        # 0.0 – 100.0, one decimal
    success_rate_label: str    # "66.7%", "0%"
    last_done: str             # YYYY-MM-DD or "Never"


@dataclass(frozen=True)
class ProgressPoint:
    date: date
    completed: int


@dataclass(frozen=True)
class DashboardSummary:
    today: date
    today_completed: int
    daily_goal: float
    daily_goal_met: bool
    current_streak: int
    total_completed: int
    total_active_days: int
    average_daily: float
    favorite_stretch: Optional[str]
    message: str


# ---------------------------------------------------------------------------
# Daily aggregation
# ---------------------------------------------------------------------------

def aggregate_daily(history: Iterable[Action]) -> list[DailyAggregate]:
    """Fold the action log into per-date counts, oldest date first."""
    completed: Counter[date] = Counter()
    skipped: Counter[date] = Counter()
    for a in history:
        if a.action == ActionType.completed:
            completed[a.date] += 1
        else:
            skipped[a.date] += 1
    days = sorted(set(completed) | set(skipped))
    return [
        DailyAggregate(date=d, completed_count=completed[d], skipped_count=skipped[d])
        for d in days
    ]


def _completed_by_date(daily: Iterable[DailyAggregate]) -> dict[date, int]:
    by_date: dict[date, int] = defaultdict(int)
    for row in daily:
        by_date[row.date] += row.completed_count
    return by_date


# ---------------------------------------------------------------------------
# Headline numbers
# ---------------------------------------------------------------------------

def today_completed_count(daily: Sequence[DailyAggregate], today: date) -> int:
    for row in daily:
        if row.date == today:
            return row.completed_count
    return 0


def current_streak(daily: Sequence[DailyAggregate], today: date) -> int:
    by_date = _completed_by_date(daily)
    streak = 0
    day = today if by_date.get(today, 0) > 0 else today - timedelta(days=1)
    while by_date.get(day, 0) > 0:
        streak += 1
        day -= timedelta(days=1)
    return streak


def total_stretches_completed(history: Iterable[Action]) -> int:
    return sum(1 for a in history if a.action == ActionType.completed)


def total_active_days(daily: Sequence[DailyAggregate]) -> int:
    return sum(1 for row in daily if row.completed_count > 0)


def average_daily_stretches(daily: Sequence[DailyAggregate]) -> float:
    """Mean completions over active days only; 0.0 when there are none."""
    active = [row.completed_count for row in daily if row.completed_count > 0]
    if not active:
        return 0.0
    return sum(active) / len(active)


def favorite_stretch(history: Iterable[Action]) -> Optional[str]:
    completed = sorted(
        (a for a in history if a.action == ActionType.completed),
        key=lambda a: (a.timestamp, a.id),
    )
    if not completed:
        return None
    # Counter keeps first-insertion order and most_common() is stable on ties.
    counts = Counter(a.stretch_name for a in completed)
    return counts.most_common(1)[0][0]


# ---------------------------------------------------------------------------
# Per-stretch table
# ---------------------------------------------------------------------------

def _rate_label(rate: float) -> str:
    return f"{rate:g}%"


def detailed_stats_table(
    history: Sequence[Action],
    catalog: Sequence[Stretch],
) -> list[StretchStatsRow]:
    """One row per catalog stretch, most completed first."""
    by_stretch: dict[int, list[Action]] = defaultdict(list)
    for a in history:
        by_stretch[a.stretch_id].append(a)

    rows = []
    for stretch in catalog:
        actions = by_stretch.get(stretch.id, [])
        completed_dates = [a.date for a in actions if a.action == ActionType.completed]
        completed = len(completed_dates)
        skipped = sum(1 for a in actions if a.action == ActionType.skipped)
        total = completed + skipped

        rate = round(completed / total * 100, 1) if total else 0.0
        rows.append(StretchStatsRow(
            stretch_id=stretch.id,
            stretch=stretch.name,
            completed=completed,
            skipped=skipped,
            total=total,
            success_rate=rate,
            success_rate_label=_rate_label(rate) if total else "0%",
            last_done=max(completed_dates).strftime("%Y-%m-%d") if completed_dates else NEVER,
        ))

    # sorted() is stable: ties keep catalog order
    return sorted(rows, key=lambda r: r.completed, reverse=True)


# ---------------------------------------------------------------------------
# Chart-ready series
# ---------------------------------------------------------------------------

def daily_progress(
    daily: Sequence[DailyAggregate],
    today: date,
    days: int = 7,
) -> list[ProgressPoint]:
    """Completions for each of the last `days` days, zero-filled, oldest first."""
    by_date = _completed_by_date(daily)
    window = [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
    return [ProgressPoint(date=d, completed=by_date.get(d, 0)) for d in window]


def weekly_totals(daily: Sequence[DailyAggregate]) -> list[tuple[str, int]]:
    """Completions per week keyed "%Y-W%U" (Sunday-start weeks), oldest first."""
    totals: dict[str, int] = defaultdict(int)
    for row in sorted(daily, key=lambda r: r.date):
        totals[row.date.strftime("%Y-W%U")] += row.completed_count
    return sorted(totals.items())


def stretch_frequency(history: Iterable[Action], limit: int = 10) -> list[tuple[str, int]]:
    """Top `limit` stretch names by completions."""
    counts = Counter(a.stretch_name for a in history if a.action == ActionType.completed)
    return counts.most_common(limit)


# ---------------------------------------------------------------------------
# Dashboard summary
# ---------------------------------------------------------------------------

def motivational_message(
    daily: Sequence[DailyAggregate],
    today: date,
    rng: Optional[random.Random] = None,
) -> str:
    pool = motivational_pool(today_completed_count(daily, today), current_streak(daily, today))
    return (rng or random).choice(pool)


def summarize(
    daily: Sequence[DailyAggregate],
    history: Sequence[Action],
    prefs: Preferences,
    today: date,
    rng: Optional[random.Random] = None,
) -> DashboardSummary:
    today_count = today_completed_count(daily, today)
    return DashboardSummary(
        today=today,
        today_completed=today_count,
        daily_goal=prefs.daily_goal,
        daily_goal_met=today_count >= prefs.daily_goal,
        current_streak=current_streak(daily, today),
        total_completed=total_stretches_completed(history),
        total_active_days=total_active_days(daily),
        average_daily=average_daily_stretches(daily),
        favorite_stretch=favorite_stretch(history),
        message=motivational_message(daily, today, rng),
    )
