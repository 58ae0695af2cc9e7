"""Create lease_charges table

Revision ID: 20260301_000003
Revises: 20260301_000002
Create Date: 2026-03-01

Recurring per-lease charges shown in rent reminders.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "20260301_000003"
down_revision: Union[str, None] = "20260301_000002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

CHARGE_CATEGORIES = (
    "rent", "water_trash", "electricity", "gas", "internet", "parking", "pet_fee", "other",
)


def upgrade() -> None:
    op.create_table(
        "lease_charges",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("lease_id", sa.Integer(), nullable=False),
        sa.Column("category", sa.Enum(*CHARGE_CATEGORIES, name="lease_charge_category"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column(
            "amount_type",
            sa.Enum("fixed", "variable", name="lease_charge_amount_type"),
            nullable=False,
            server_default="fixed",
        ),
        sa.Column("fixed_amount", sa.Integer(), nullable=True),
        sa.Column("estimated_amount", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["lease_id"],
            ["leases.id"],
            name="fk_lease_charges_lease_id",
            ondelete="CASCADE",
        ),
    )
    op.create_index("ix_lease_charges_lease_id", "lease_charges", ["lease_id"])


def downgrade() -> None:
    op.drop_index("ix_lease_charges_lease_id", table_name="lease_charges")
    op.drop_table("lease_charges")
