"""Create raffles, referrals, purchases and raffle_tickets tables

Revision ID: r001_create_raffle_tables
Revises:
Create Date: 2026-10-17

This migration creates the raffle sales schema:
- raffles: inventory with confirmed (sold) and issued counters
- referrals: referral codes with an optional validity window
- purchases: one row per payment reference, PENDING/PAID/FAILED
- raffle_tickets: issued ticket codes, unique per raffle
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'r001_create_raffle_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create raffles table
    op.create_table(
        'raffles',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('photos', sa.JSON(), nullable=False),

        # Inventory
        sa.Column('ticket_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('total_tickets', sa.Integer(), nullable=False),
        sa.Column('sold_tickets', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('issued_tickets', sa.Integer(), nullable=False, server_default='0'),

        sa.Column('starts_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('ends_at', sa.DateTime(timezone=True), nullable=True),

        # Timestamps
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),

        # Constraints
        sa.CheckConstraint('ticket_price > 0', name='ck_raffles_ticket_price_positive'),
        sa.CheckConstraint('total_tickets > 0', name='ck_raffles_total_tickets_positive'),
        sa.CheckConstraint('sold_tickets >= 0', name='ck_raffles_sold_non_negative'),
        sa.CheckConstraint('sold_tickets <= total_tickets', name='ck_raffles_sold_within_total'),
        sa.CheckConstraint('issued_tickets >= 0', name='ck_raffles_issued_non_negative'),
    )

    # Create referrals table
    op.create_table(
        'referrals',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('national_id', sa.String(20), nullable=True),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('code', sa.String(50), nullable=False, unique=True),
        sa.Column('active_from', sa.DateTime(timezone=True), nullable=True),
        sa.Column('active_until', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    # Create purchases table
    op.create_table(
        'purchases',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('raffle_id', sa.String(), sa.ForeignKey('raffles.id'), nullable=False),

        # Buyer
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('national_id', sa.String(20), nullable=False),
        sa.Column('phone', sa.String(20), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),

        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('payment_method', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('operation_number', sa.String(100), nullable=False, unique=True),
        sa.Column('referral_code', sa.String(50), nullable=True),

        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),

        sa.CheckConstraint('quantity > 0', name='ck_purchases_quantity_positive'),
        sa.CheckConstraint('amount >= 0', name='ck_purchases_amount_non_negative'),
        sa.CheckConstraint("status IN ('PENDING', 'PAID', 'FAILED')", name='ck_purchases_status'),
    )
    op.create_index('ix_purchases_raffle_id', 'purchases', ['raffle_id'])
    op.create_index('ix_purchases_national_id', 'purchases', ['national_id'])
    op.create_index('ix_purchases_referral_code', 'purchases', ['referral_code'])

    # Create raffle_tickets table
    op.create_table(
        'raffle_tickets',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('raffle_id', sa.String(), sa.ForeignKey('raffles.id'), nullable=False),
        sa.Column('purchase_id', sa.String(), sa.ForeignKey('purchases.id', ondelete='CASCADE'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('code', sa.String(50), nullable=False),
        sa.UniqueConstraint('raffle_id', 'code', name='uq_raffle_tickets_raffle_code'),
    )
    op.create_index('ix_raffle_tickets_purchase_id', 'raffle_tickets', ['purchase_id'])
    op.create_index('ix_raffle_tickets_code', 'raffle_tickets', ['code'])


def downgrade() -> None:
    op.drop_index('ix_raffle_tickets_code', table_name='raffle_tickets')
    op.drop_index('ix_raffle_tickets_purchase_id', table_name='raffle_tickets')
    op.drop_table('raffle_tickets')

    op.drop_index('ix_purchases_referral_code', table_name='purchases')
    op.drop_index('ix_purchases_national_id', table_name='purchases')
    op.drop_index('ix_purchases_raffle_id', table_name='purchases')
    op.drop_table('purchases')

    op.drop_table('referrals')
    op.drop_table('raffles')
