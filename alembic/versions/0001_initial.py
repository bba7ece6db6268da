"""Initial price alert tables

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_ACTIVE_ONLY = {
    'sqlite_where': sa.text('is_active = 1'),
    'postgresql_where': sa.text('is_active'),
}


def upgrade() -> None:
    op.create_table(
        'product',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('current_price', sa.Integer(), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'price_alert',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('product_id', sa.Uuid(), nullable=False),
        sa.Column('target_price', sa.Integer(), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False),
        sa.Column('alert_type', sa.String(), nullable=False),
        sa.Column('threshold', sa.Float(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_price_alert_user_id', 'price_alert', ['user_id'])
    op.create_index('ix_price_alert_product_active', 'price_alert', ['product_id', 'is_active'])
    # At most one active alert per (user, product)
    op.create_index(
        'uq_price_alert_user_product_active',
        'price_alert',
        ['user_id', 'product_id'],
        unique=True,
        **_ACTIVE_ONLY,
    )

    op.create_table(
        'notification_preferences',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('notification_email', sa.Boolean(), nullable=False),
        sa.Column('notification_push', sa.Boolean(), nullable=False),
        sa.Column('quiet_hours_start', sa.String(), nullable=True),
        sa.Column('quiet_hours_end', sa.String(), nullable=True),
        sa.Column('timezone', sa.String(), nullable=False),
        sa.Column('language', sa.String(), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_notification_preferences_user_id',
        'notification_preferences',
        ['user_id'],
        unique=True,
    )

    op.create_table(
        'anonymous_price_alert',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('product_id', sa.Uuid(), nullable=False),
        sa.Column('target_price', sa.Integer(), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False),
        sa.Column('alert_type', sa.String(), nullable=False),
        sa.Column('threshold', sa.Float(), nullable=True),
        sa.Column('verification_token', sa.String(), nullable=False),
        sa.Column('management_token', sa.String(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('verification_token'),
        sa.UniqueConstraint('management_token'),
    )
    op.create_index('ix_anonymous_price_alert_email', 'anonymous_price_alert', ['email'])
    op.create_index('ix_anonymous_price_alert_product_id', 'anonymous_price_alert', ['product_id'])
    op.create_index(
        'ix_anonymous_alert_verified_active',
        'anonymous_price_alert',
        ['is_verified', 'is_active'],
    )
    op.create_index(
        'uq_anonymous_alert_email_product_active',
        'anonymous_price_alert',
        ['email', 'product_id'],
        unique=True,
        **_ACTIVE_ONLY,
    )


def downgrade() -> None:
    op.drop_table('anonymous_price_alert')
    op.drop_table('notification_preferences')
    op.drop_table('price_alert')
    op.drop_table('product')
