from sqlalchemy import Boolean, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from stretch_tracker.core.types import Category, Priority
from stretch_tracker.db.base import Base


class Stretch(Base):
    """Catalog entry. Ids are assigned by the store (max + 1), not the database."""

    __tablename__ = "stretches"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    priority: Mapped[str] = mapped_column(
        Enum(Priority, name="priority_enum"),
        nullable=False,
    )
    category: Mapped[str] = mapped_column(
        Enum(Category, name="category_enum"),
        nullable=False,
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    enabled: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=True)
