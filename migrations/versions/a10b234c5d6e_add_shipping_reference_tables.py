"""add shipping reference tables

Revision ID: a10b234c5d6e
Revises:
Create Date: 2026-10-17 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = 'a10b234c5d6e'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('shipping_methods',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('key', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('estimated_days', sa.String(length=100), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('default_cost', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.CheckConstraint('default_cost >= 0', name='check_default_cost_non_negative'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('key')
    )

    op.create_table('shipping_rates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('shipping_method_id', sa.Integer(), nullable=False),
        sa.Column('country', sa.String(length=3), nullable=False, server_default=''),
        sa.Column('state', sa.String(length=10), nullable=True),
        sa.Column('min_weight', sa.Numeric(10, 3), nullable=False),
        sa.Column('max_weight', sa.Numeric(10, 3), nullable=False),
        sa.Column('cost', sa.Numeric(10, 2), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.CheckConstraint('min_weight <= max_weight', name='check_rate_min_max_weight'),
        sa.CheckConstraint('cost >= 0', name='check_rate_cost_non_negative'),
        sa.ForeignKeyConstraint(['shipping_method_id'], ['shipping_methods.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_shipping_rates_shipping_method_id', 'shipping_rates', ['shipping_method_id'])
    op.create_index('ix_shipping_rates_country', 'shipping_rates', ['country'])
    op.create_index('idx_rate_method_country_state', 'shipping_rates', ['shipping_method_id', 'country', 'state'])

    op.create_table('tax_rates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('country', sa.String(length=3), nullable=False, server_default=''),
        sa.Column('state', sa.String(length=10), nullable=True),
        sa.Column('rate', sa.Numeric(6, 4), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.CheckConstraint('rate >= 0 AND rate <= 1', name='check_tax_rate_fraction'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_tax_rates_country', 'tax_rates', ['country'])
    op.create_index('ix_tax_rates_is_active', 'tax_rates', ['is_active'])
    op.create_index('idx_tax_country_state', 'tax_rates', ['country', 'state'])


def downgrade() -> None:
    op.drop_index('idx_tax_country_state', table_name='tax_rates')
    op.drop_index('ix_tax_rates_is_active', table_name='tax_rates')
    op.drop_index('ix_tax_rates_country', table_name='tax_rates')
    op.drop_table('tax_rates')

    op.drop_index('idx_rate_method_country_state', table_name='shipping_rates')
    op.drop_index('ix_shipping_rates_country', table_name='shipping_rates')
    op.drop_index('ix_shipping_rates_shipping_method_id', table_name='shipping_rates')
    op.drop_table('shipping_rates')

    op.drop_table('shipping_methods')
