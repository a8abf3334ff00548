"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18

Creates all tables for the points ledger:
employees, points_rewards, point_events.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

point_source = sa.Enum("manual_award", "game_award", "redemption", "undo", name="pointsource")


def upgrade() -> None:
    # --- employees ---
    op.create_table(
        "employees",
        sa.Column("employee_id", sa.String(36), primary_key=True),
        sa.Column("location_id", sa.String(36), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("title", sa.String(50), nullable=False, server_default="Team Member"),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("ledger_version", sa.Integer, nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_employees_location_id", "employees", ["location_id"])

    # --- points_rewards ---
    op.create_table(
        "points_rewards",
        sa.Column("reward_id", sa.String(36), primary_key=True),
        sa.Column("location_id", sa.String(36), nullable=False),
        sa.Column("reward_name", sa.String(150), nullable=False),
        sa.Column("points_cost", sa.Integer, nullable=False),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("points_cost > 0", name="ck_points_rewards_cost_positive"),
    )
    op.create_index("ix_points_rewards_location_id", "points_rewards", ["location_id"])

    # --- point_events ---
    op.create_table(
        "point_events",
        sa.Column("event_id", sa.String(36), primary_key=True),
        sa.Column("employee_id", sa.String(36), nullable=False),
        sa.Column("location_id", sa.String(36), nullable=False),
        sa.Column("amount", sa.Integer, nullable=False),
        sa.Column("source", point_source, nullable=False),
        sa.Column("source_detail", sa.String(500), nullable=True),
        sa.Column("awarded_by", sa.String(36), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("reversed_by_event_id", sa.String(36), nullable=True),
        sa.CheckConstraint("amount != 0", name="ck_point_events_amount_nonzero"),
    )
    op.create_index("ix_point_events_location_created", "point_events", ["location_id", "created_at"])
    op.create_index("ix_point_events_employee", "point_events", ["employee_id"])
    op.create_index("ix_point_events_awarded_by_created", "point_events", ["awarded_by", "created_at"])


def downgrade() -> None:
    op.drop_table("point_events")
    op.drop_table("points_rewards")
    op.drop_table("employees")
    point_source.drop(op.get_bind(), checkfirst=True)
