"""Add rent policy and status columns to leases

Revision ID: 20260301_000001
Revises: None
Create Date: 2026-03-01

Leases move to integer cents and gain a lifecycle status plus the late fee
policy (flat fee and grace days) read by the scheduler. Properties gain an
optional manager contact.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20260301_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

LEASE_STATUSES = ('draft', 'pending', 'active', 'expired', 'terminated', 'renewed')


def upgrade() -> None:
    """Add lease status, cents pricing and late fee policy."""
    op.add_column(
        'leases',
        sa.Column(
            'status',
            sa.Enum(*LEASE_STATUSES, name='lease_status'),
            nullable=False,
            server_default='active'
        )
    )
    op.add_column('leases', sa.Column('monthly_rent', sa.Integer(), nullable=True))
    op.add_column('leases', sa.Column('security_deposit', sa.Integer(), nullable=True))
    op.add_column('leases', sa.Column('late_fee_amount', sa.Integer(), nullable=True))
    op.add_column(
        'leases',
        sa.Column('late_fee_grace_days', sa.Integer(), nullable=True, server_default='5')
    )

    # Existing decimal prices become cents
    op.execute("UPDATE leases SET monthly_rent = CAST(rent_price * 100 AS INTEGER)")
    op.execute(
        "UPDATE leases SET security_deposit = CAST(deposit_price * 100 AS INTEGER) "
        "WHERE deposit_price IS NOT NULL"
    )
    with op.batch_alter_table('leases') as batch_op:
        batch_op.alter_column('monthly_rent', existing_type=sa.Integer(), nullable=False)

    op.create_index('ix_leases_status', 'leases', ['status'])
    op.create_index('ix_leases_end_date', 'leases', ['end_date'])

    op.add_column('properties', sa.Column('manager_user_id', sa.Integer(), nullable=True))
    op.create_foreign_key(
        'fk_properties_manager_user_id',
        'properties',
        'users',
        ['manager_user_id'],
        ['id'],
        ondelete='SET NULL',
    )


def downgrade() -> None:
    """Drop the scheduler's lease and property columns."""
    op.drop_constraint('fk_properties_manager_user_id', 'properties', type_='foreignkey')
    op.drop_column('properties', 'manager_user_id')

    op.drop_index('ix_leases_end_date', table_name='leases')
    op.drop_index('ix_leases_status', table_name='leases')
    op.drop_column('leases', 'late_fee_grace_days')
    op.drop_column('leases', 'late_fee_amount')
    op.drop_column('leases', 'security_deposit')
    op.drop_column('leases', 'monthly_rent')
    op.drop_column('leases', 'status')
