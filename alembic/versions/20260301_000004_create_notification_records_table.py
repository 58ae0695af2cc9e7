"""Create notification_records table

Revision ID: 20260301_000004
Revises: 20260301_000003
Create Date: 2026-03-01

Dedup markers for scheduled notifications. The unique (entity_id, kind, day)
constraint makes claiming a marker atomic.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "20260301_000004"
down_revision: Union[str, None] = "20260301_000003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "notification_records",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("entity_id", sa.String(64), nullable=False),
        sa.Column("kind", sa.String(64), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("entity_id", "kind", "day", name="uq_notification_records_entity_kind_day"),
    )
    op.create_index("ix_notification_records_entity_id", "notification_records", ["entity_id"])


def downgrade() -> None:
    op.drop_index("ix_notification_records_entity_id", table_name="notification_records")
    op.drop_table("notification_records")
