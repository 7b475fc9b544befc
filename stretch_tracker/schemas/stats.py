"""
Stats response schemas.

GET /stats/summary    → SummaryResponse
GET /stats/daily      → DailyStatsResponse
GET /stats/detailed   → DetailedStatsResponse
GET /stats/progress   → ProgressResponse
GET /stats/weekly     → WeeklyTotalsResponse
GET /stats/frequency  → FrequencyResponse
"""
from typing import Optional

from pydantic import BaseModel, Field


class SummaryResponse(BaseModel):
    today: str
    today_completed: int
    daily_goal: float
    daily_goal_met: bool
    current_streak: int
    total_completed: int
    total_active_days: int
    average_daily: float = Field(description="Mean completions over active days, one decimal.")
    favorite_stretch: Optional[str] = Field(default=None, description="null until something is completed.")
    message: str


class DailyStatsRow(BaseModel):
    date: str
    completed_count: int
    skipped_count: int
    total_count: int


class DailyStatsResponse(BaseModel):
    items: list[DailyStatsRow]


class StretchStatsRowResponse(BaseModel):
    stretch_id: int
    stretch: str
    completed: int
    skipped: int
    total: int
    success_rate: float
    success_rate_label: str
    last_done: str = Field(description='YYYY-MM-DD or "Never"')


class DetailedStatsResponse(BaseModel):
    items: list[StretchStatsRowResponse]


class ProgressPointResponse(BaseModel):
    date: str
    completed: int


class ProgressResponse(BaseModel):
    days: int
    items: list[ProgressPointResponse]


class WeeklyTotal(BaseModel):
    week: str = Field(description='"%Y-W%U" week key')
    completed: int


class WeeklyTotalsResponse(BaseModel):
    items: list[WeeklyTotal]


class FrequencyItem(BaseModel):
    stretch: str
    completed: int


class FrequencyResponse(BaseModel):
    items: list[FrequencyItem]
