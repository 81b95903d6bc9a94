"""Create shipping_quotes and shipments tables

Revision ID: 001_shipping_quotes_and_shipments
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001_shipping_quotes_and_shipments'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    shipmentstatus_enum = postgresql.ENUM(
        'LABEL_PURCHASED', 'IN_TRANSIT', 'DELIVERED', 'VOIDED',
        name='shipmentstatus'
    )
    shipmentstatus_enum.create(op.get_bind(), checkfirst=True)

    op.create_table(
        'shipping_quotes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('quote_key', sa.String(), nullable=False),
        sa.Column('items', sa.JSON(), nullable=False),
        sa.Column('ship_to', sa.JSON(), nullable=False),
        sa.Column('rates', sa.JSON(), nullable=False),
        sa.Column('selected_rate_id', sa.String(), nullable=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text("timezone('utc', now())"), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text("timezone('utc', now())"), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_shipping_quotes_id', 'shipping_quotes', ['id'])
    op.create_index('ix_shipping_quotes_quote_key', 'shipping_quotes', ['quote_key'], unique=True)
    op.create_index('ix_shipping_quotes_expires_at', 'shipping_quotes', ['expires_at'])

    op.create_table(
        'shipments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_id', sa.String(), nullable=True),
        sa.Column('rate_id', sa.String(), nullable=False),
        sa.Column('status', postgresql.ENUM(name='shipmentstatus', create_type=False), nullable=True),
        sa.Column('carrier', sa.String(), nullable=True),
        sa.Column('service', sa.String(), nullable=True),
        sa.Column('tracking_number', sa.String(), nullable=True),
        sa.Column('tracking_url', sa.String(), nullable=True),
        sa.Column('label_cost_cents', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text("timezone('utc', now())"), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text("timezone('utc', now())"), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_shipments_id', 'shipments', ['id'])
    op.create_index('ix_shipments_order_id', 'shipments', ['order_id'])
    op.create_index('ix_shipments_rate_id', 'shipments', ['rate_id'])
    op.create_index('ix_shipments_status', 'shipments', ['status'])
    op.create_index('ix_shipments_carrier', 'shipments', ['carrier'])
    op.create_index('ix_shipments_tracking_number', 'shipments', ['tracking_number'])


def downgrade() -> None:
    op.drop_table('shipments')
    op.drop_table('shipping_quotes')
    postgresql.ENUM(name='shipmentstatus').drop(op.get_bind(), checkfirst=True)
