"""
Stats router — dashboard numbers and chart-ready series.

GET /stats/summary     — headline numbers + motivational message
GET /stats/daily       — per-date completed / skipped / total
GET /stats/detailed    — per-stretch success table
GET /stats/progress    — last N days, zero-filled
GET /stats/weekly      — completions per week
GET /stats/frequency   — most completed stretches
"""
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query

from stretch_tracker.core.clock import local_today
from stretch_tracker.schemas.stats import (
    DailyStatsResponse,
    DailyStatsRow,
    DetailedStatsResponse,
    FrequencyItem,
    FrequencyResponse,
    ProgressPointResponse,
    ProgressResponse,
    StretchStatsRowResponse,
    SummaryResponse,
    WeeklyTotal,
    WeeklyTotalsResponse,
)
from stretch_tracker.services import stats
from stretch_tracker.stores import Stores, get_stores

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/summary", response_model=SummaryResponse, summary="Dashboard summary")
def summary(
    stores: Stores = Depends(get_stores),
    today: date = Depends(local_today),
):
    """
    Today's completions against `daily_goal`, the current streak (consecutive
    days with at least one completion, ending today, or yesterday while
    nothing is done yet today; a day with no activity breaks it), all-time
    totals and a motivational message.
    """
    s = stats.summarize(
        daily=stores.history.daily_aggregates(),
        history=stores.history.query_all(),
        prefs=stores.preferences.get(),
        today=today,
    )
    return SummaryResponse(
        today=str(s.today),
        today_completed=s.today_completed,
        daily_goal=s.daily_goal,
        daily_goal_met=s.daily_goal_met,
        current_streak=s.current_streak,
        total_completed=s.total_completed,
        total_active_days=s.total_active_days,
        average_daily=round(s.average_daily, 1),
        favorite_stretch=s.favorite_stretch,
        message=s.message,
    )


@router.get("/daily", response_model=DailyStatsResponse, summary="Per-day counts")
def daily(stores: Stores = Depends(get_stores)):
    return DailyStatsResponse(items=[
        DailyStatsRow(
            date=str(row.date),
            completed_count=row.completed_count,
            skipped_count=row.skipped_count,
            total_count=row.total_count,
        )
        for row in stores.history.daily_aggregates()
    ])


@router.get("/detailed", response_model=DetailedStatsResponse, summary="Per-stretch success table")
def detailed(stores: Stores = Depends(get_stores)):
    """Every catalog stretch, including ones never attempted, most completed first."""
    rows = stats.detailed_stats_table(stores.history.query_all(), stores.catalog.list())
    return DetailedStatsResponse(items=[
        StretchStatsRowResponse(
            stretch_id=r.stretch_id,
            stretch=r.stretch,
            completed=r.completed,
            skipped=r.skipped,
            total=r.total,
            success_rate=r.success_rate,
            success_rate_label=r.success_rate_label,
            last_done=r.last_done,
        )
        for r in rows
    ])


@router.get("/progress", response_model=ProgressResponse, summary="Recent daily completions")
def progress(
    days: int = Query(default=7, ge=1, le=366, description="Window length ending today."),
    stores: Stores = Depends(get_stores),
    today: date = Depends(local_today),
):
    points = stats.daily_progress(stores.history.daily_aggregates(), today, days=days)
    return ProgressResponse(
        days=days,
        items=[ProgressPointResponse(date=str(p.date), completed=p.completed) for p in points],
    )


@router.get("/weekly", response_model=WeeklyTotalsResponse, summary="Completions per week")
def weekly(stores: Stores = Depends(get_stores)):
    totals = stats.weekly_totals(stores.history.daily_aggregates())
    return WeeklyTotalsResponse(items=[WeeklyTotal(week=w, completed=c) for w, c in totals])


@router.get("/frequency", response_model=FrequencyResponse, summary="Most completed stretches")
def frequency(
    limit: int = Query(default=10, ge=1, le=100),
    stores: Stores = Depends(get_stores),
):
    top = stats.stretch_frequency(stores.history.query_all(), limit=limit)
    return FrequencyResponse(items=[FrequencyItem(stretch=n, completed=c) for n, c in top])
