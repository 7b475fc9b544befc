"""
Single source of "now" and "today" for the HTTP layer.

The core services never read the clock; routers resolve these as FastAPI
dependencies and pass the values down. Action.date and the gate's "today"
both come from here, in the configured TIMEZONE.
"""
from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from stretch_tracker.core.config import settings


def local_now() -> datetime:
    return datetime.now(tz=ZoneInfo(settings.TIMEZONE))


def local_today() -> date:
    return local_now().date()
