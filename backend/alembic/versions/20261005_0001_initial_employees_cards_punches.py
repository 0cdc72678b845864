"""initial: employees, employee_cards, attendance_punches

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-05 00:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "0001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- employees ---
    op.create_table(
        "employees",
        sa.Column("id", sa.Uuid(), nullable=False, server_default=sa.text("gen_random_uuid()")),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # --- employee_cards ---
    op.create_table(
        "employee_cards",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("card_id", sa.String(100), nullable=False),
        sa.Column("employee_id", sa.Uuid(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("card_id"),
    )

    # --- attendance_punches ---
    op.create_table(
        "attendance_punches",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("employee_id", sa.Uuid(), nullable=False),
        sa.Column("punch_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "punch_type",
            sa.Enum("in", "out", name="punch_type_enum"),
            nullable=False,
        ),
        sa.Column("card_id", sa.String(100), nullable=False),
        sa.Column("device_id", sa.String(255), nullable=True),
        sa.Column("device_location", sa.String(255), nullable=True),
        sa.Column("source", sa.String(50), nullable=False, server_default="card"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_punches_employee_time",
        "attendance_punches",
        ["employee_id", "punch_time"],
    )
    op.create_index("ix_punches_card_id", "attendance_punches", ["card_id"])


def downgrade() -> None:
    op.drop_index("ix_punches_card_id", table_name="attendance_punches")
    op.drop_index("ix_punches_employee_time", table_name="attendance_punches")
    op.drop_table("attendance_punches")
    op.drop_table("employee_cards")
    op.drop_table("employees")
    op.execute("DROP TYPE IF EXISTS punch_type_enum")
