"""Create rent_payments table

Revision ID: 20260301_000002
Revises: 20260301_000001
Create Date: 2026-03-01

One ledger entry per billing period per lease. Amounts are in cents.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "20260301_000002"
down_revision: Union[str, None] = "20260301_000001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PAYMENT_STATUSES = ("upcoming", "due", "partial", "paid", "late", "waived")
PAYMENT_METHODS = ("cash", "check", "ach", "card", "other")


def upgrade() -> None:
    op.create_table(
        "rent_payments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("lease_id", sa.Integer(), nullable=False),
        sa.Column("period_start", sa.Date(), nullable=False),
        sa.Column("period_end", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("amount_due", sa.Integer(), nullable=False),
        sa.Column("amount_paid", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("late_fee", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "status",
            sa.Enum(*PAYMENT_STATUSES, name="rent_payment_status"),
            nullable=False,
            server_default="upcoming",
        ),
        sa.Column("paid_at", sa.DateTime(), nullable=True),
        sa.Column("payment_method", sa.Enum(*PAYMENT_METHODS, name="payment_method"), nullable=True),
        sa.Column("payment_reference", sa.String(255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["lease_id"],
            ["leases.id"],
            name="fk_rent_payments_lease_id",
            ondelete="CASCADE",
        ),
    )
    op.create_index("ix_rent_payments_lease_id", "rent_payments", ["lease_id"])
    op.create_index("ix_rent_payments_due_date", "rent_payments", ["due_date"])
    op.create_index("ix_rent_payments_status", "rent_payments", ["status"])


def downgrade() -> None:
    op.drop_index("ix_rent_payments_status", table_name="rent_payments")
    op.drop_index("ix_rent_payments_due_date", table_name="rent_payments")
    op.drop_index("ix_rent_payments_lease_id", table_name="rent_payments")
    op.drop_table("rent_payments")
