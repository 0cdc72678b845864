"""add daily_attendance summary table

Revision ID: 0002_add_daily_attendance
Revises: 0001_initial
Create Date: 2026-10-12 00:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "0002_add_daily_attendance"
down_revision: Union[str, None] = "0001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "daily_attendance",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("employee_id", sa.Uuid(), nullable=False),
        sa.Column("work_date", sa.Date(), nullable=False),
        sa.Column("check_in", sa.DateTime(timezone=True), nullable=True),
        sa.Column("check_out", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "status",
            sa.Enum("present", name="attendance_status_enum"),
            nullable=False,
            server_default="present",
        ),
        sa.Column("work_hours", sa.Float(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        # ON CONFLICT target of the daily upsert
        sa.UniqueConstraint("employee_id", "work_date", name="uq_daily_attendance_employee_day"),
    )
    op.create_index("ix_daily_attendance_work_date", "daily_attendance", ["work_date"])


def downgrade() -> None:
    op.drop_index("ix_daily_attendance_work_date", table_name="daily_attendance")
    op.drop_table("daily_attendance")
    op.execute("DROP TYPE IF EXISTS attendance_status_enum")
