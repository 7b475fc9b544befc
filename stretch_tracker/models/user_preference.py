from sqlalchemy import Float, String
from sqlalchemy.orm import Mapped, mapped_column

from stretch_tracker.db.base import Base


class UserPreference(Base):
    """Key/value tuning parameter. Missing keys fall back to Preferences defaults."""

    __tablename__ = "user_preferences"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[float] = mapped_column(Float, nullable=False)
