"""
StretchHistory — one row per recorded user action.

Append-only. `stretch_name` is a copy taken at record time so history keeps
its label after the stretch is renamed or deleted. There is no
foreign key: deleting a stretch removes its rows in the same transaction
(see stores/sql.py).
"""
from datetime import date as date_type
from datetime import datetime

from sqlalchemy import Date, DateTime, Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from stretch_tracker.core.types import ActionType
from stretch_tracker.db.base import Base


class StretchHistory(Base):
    __tablename__ = "stretch_history"
    # AUTOINCREMENT on SQLite so ids are never reused after a reset
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    stretch_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    stretch_name: Mapped[str] = mapped_column(String(100), nullable=False)
    action: Mapped[str] = mapped_column(
        Enum(ActionType, name="action_type_enum"),
        nullable=False,
    )
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    date: Mapped[date_type] = mapped_column(Date, nullable=False, index=True)
