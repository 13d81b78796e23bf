"""create holdings, orders and positions tables

Revision ID: 3c1d9a7e5b20
Revises:
Create Date: 2026-10-19 10:04:12.518330

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c1d9a7e5b20'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('holdings',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('instrument', sa.String(), nullable=False),
    sa.Column('instrument_key', sa.String(), nullable=False),
    sa.Column('quantity', sa.Numeric(precision=18, scale=8), nullable=True),
    sa.Column('average_price', sa.Numeric(precision=18, scale=6), nullable=True),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.Column('updated_at', sa.DateTime(), nullable=True),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_holdings_instrument_key'), 'holdings', ['instrument_key'], unique=True)

    op.create_table('orders',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('sequence', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('instrument', sa.String(), nullable=False),
    sa.Column('quantity', sa.Numeric(precision=18, scale=8), nullable=False),
    sa.Column('price', sa.Numeric(precision=18, scale=6), nullable=False),
    sa.Column('side', sa.String(length=4), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.PrimaryKeyConstraint('sequence'),
    sa.UniqueConstraint('id')
    )
    op.create_index(op.f('ix_orders_instrument'), 'orders', ['instrument'], unique=False)

    op.create_table('positions',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('product', sa.String(), nullable=True),
    sa.Column('instrument', sa.String(), nullable=False),
    sa.Column('quantity', sa.Numeric(precision=18, scale=8), nullable=True),
    sa.Column('average_price', sa.Numeric(precision=18, scale=6), nullable=True),
    sa.Column('last_price', sa.Numeric(precision=18, scale=6), nullable=True),
    sa.Column('net_change', sa.String(), nullable=True),
    sa.Column('day_change', sa.String(), nullable=True),
    sa.Column('is_loss', sa.Boolean(), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.PrimaryKeyConstraint('id')
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('positions')
    op.drop_index(op.f('ix_orders_instrument'), table_name='orders')
    op.drop_table('orders')
    op.drop_index(op.f('ix_holdings_instrument_key'), table_name='holdings')
    op.drop_table('holdings')
