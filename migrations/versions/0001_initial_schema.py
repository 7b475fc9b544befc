"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_PRIORITIES = ("high", "low")
_CATEGORIES = (
    "hips", "core", "feet_ankles", "spine_shoulders",
    "functional", "mobility", "flexibility", "general",
)
_ACTIONS = ("completed", "skipped")


def upgrade() -> None:
    # --- ENUM types ---
    priority_enum = sa.Enum(*_PRIORITIES, name="priority_enum")
    priority_enum.create(op.get_bind(), checkfirst=True)

    category_enum = sa.Enum(*_CATEGORIES, name="category_enum")
    category_enum.create(op.get_bind(), checkfirst=True)

    action_type_enum = sa.Enum(*_ACTIONS, name="action_type_enum")
    action_type_enum.create(op.get_bind(), checkfirst=True)

    # --- stretches ---
    op.create_table(
        "stretches",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("priority", sa.Enum(*_PRIORITIES, name="priority_enum", create_type=False), nullable=False),
        sa.Column("category", sa.Enum(*_CATEGORIES, name="category_enum", create_type=False), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    # --- stretch_history ---
    op.create_table(
        "stretch_history",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("stretch_id", sa.Integer(), nullable=False),
        sa.Column("stretch_name", sa.String(100), nullable=False),
        sa.Column("action", sa.Enum(*_ACTIONS, name="action_type_enum", create_type=False), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_stretch_history_stretch_id", "stretch_history", ["stretch_id"])
    op.create_index("ix_stretch_history_date", "stretch_history", ["date"])

    # --- user_preferences ---
    op.create_table(
        "user_preferences",
        sa.Column("key", sa.String(64), nullable=False),
        sa.Column("value", sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint("key"),
    )

    # --- seed default preferences ---
    prefs = sa.table("user_preferences", sa.column("key", sa.String), sa.column("value", sa.Float))
    op.bulk_insert(prefs, [
        {"key": "daily_goal", "value": 5},
        {"key": "high_priority_weight", "value": 3},
        {"key": "low_priority_weight", "value": 1},
        {"key": "recency_weight", "value": 2},
        {"key": "never_done_bonus", "value": 5},
    ])


def downgrade() -> None:
    op.drop_table("user_preferences")
    op.drop_index("ix_stretch_history_date", table_name="stretch_history")
    op.drop_index("ix_stretch_history_stretch_id", table_name="stretch_history")
    op.drop_table("stretch_history")
    op.drop_table("stretches")
    sa.Enum(name="action_type_enum").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="category_enum").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="priority_enum").drop(op.get_bind(), checkfirst=True)
