"""Initial schema baseline

This migration creates the complete database schema for Simple Investor.

Tables:
    - instruments: Tradable instruments keyed by symbol
    - prices: Manual price observations (one per symbol and timestamp)
    - purchases: Units acquired at a point in time (symbol by value, no FK)
    - goals: Savings goals with flat monthly contributions

All timestamps of prices and purchases are epoch milliseconds.

Revision ID: 001
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ==========================================================================
    # INSTRUMENTS
    # ==========================================================================
    op.create_table(
        'instruments',
        sa.Column('symbol', sa.String(length=32), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )

    # ==========================================================================
    # PRICES
    # ==========================================================================
    op.create_table(
        'prices',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column(
            'symbol',
            sa.String(length=32),
            sa.ForeignKey('instruments.symbol', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('timestamp', sa.BigInteger(), nullable=False),
        sa.Column('price', sa.Numeric(18, 8), nullable=False),
        sa.UniqueConstraint('symbol', 'timestamp', name='uq_price_symbol_timestamp'),
    )

    # ==========================================================================
    # PURCHASES
    # ==========================================================================
    op.create_table(
        'purchases',
        sa.Column('id', sa.Integer(), primary_key=True, index=True, autoincrement=True),
        sa.Column('symbol', sa.String(length=32), nullable=False),
        sa.Column('timestamp', sa.BigInteger(), nullable=False, index=True),
        sa.Column('quantity', sa.Numeric(28, 12), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_purchase_symbol_timestamp', 'purchases', ['symbol', 'timestamp'])

    # ==========================================================================
    # GOALS
    # ==========================================================================
    op.create_table(
        'goals',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('target', sa.Numeric(18, 2), nullable=False),
        sa.Column('monthly', sa.Numeric(18, 2), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table('goals')
    op.drop_index('ix_purchase_symbol_timestamp', table_name='purchases')
    op.drop_table('purchases')
    op.drop_table('prices')
    op.drop_table('instruments')
