"""create_marketplace_tables

Revision ID: 5f2c9a7d1e30
Revises:
Create Date: 2026-10-19 09:12:44.218391

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5f2c9a7d1e30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column('location', sa.JSON(), nullable=True),
        sa.Column('rating', sa.Float(), nullable=False),
        sa.Column('total_ratings', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )

    op.create_table(
        'outfits',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('owner_id', sa.String(length=64), nullable=False, comment='User who listed the outfit'),
        sa.Column('title', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('size', sa.String(length=8), nullable=False),
        sa.Column('category', sa.String(length=20), nullable=False),
        sa.Column('style_tags', sa.JSON(), nullable=False),
        sa.Column('price_per_hour', sa.Float(), nullable=False),
        sa.Column('price_per_day', sa.Float(), nullable=False),
        sa.Column('location', sa.JSON(), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('availability_dates', sa.JSON(), nullable=False, comment='Availability ranges; overlap is not enforced'),
        sa.Column('rating', sa.Float(), nullable=False),
        sa.Column('total_ratings', sa.Integer(), nullable=False),
        sa.Column('available', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_outfits_owner_id', 'outfits', ['owner_id'])
    op.create_index('ix_outfits_category', 'outfits', ['category'])
    op.create_index('ix_outfits_size', 'outfits', ['size'])
    op.create_index('ix_outfits_created_at', 'outfits', ['created_at'])
    op.create_index('ix_outfits_rating', 'outfits', ['rating'])
    op.create_index('ix_outfits_available_price', 'outfits', ['available', 'price_per_day'])
    op.create_index('ix_outfits_lat_lon', 'outfits', ['latitude', 'longitude'])

    op.create_table(
        'rentals',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('outfit_id', sa.String(length=32), nullable=False),
        sa.Column('renter_id', sa.String(length=64), nullable=False),
        sa.Column('owner_id', sa.String(length=64), nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('total_price', sa.Float(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('cancel_reason', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_rentals_renter_id', 'rentals', ['renter_id'])
    op.create_index('ix_rentals_owner_id', 'rentals', ['owner_id'])
    op.create_index('ix_rentals_outfit_id', 'rentals', ['outfit_id'])
    op.create_index('ix_rentals_status', 'rentals', ['status'])
    op.create_index('ix_rentals_start_date', 'rentals', ['start_date'])

    op.create_table(
        'ratings',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('target_type', sa.String(length=10), nullable=False),
        sa.Column('target_id', sa.String(length=64), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False, comment='Rating value (1-5 stars)'),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('from_user_id', sa.String(length=64), nullable=False),
        sa.Column('rental_id', sa.String(length=32), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_ratings_target', 'ratings', ['target_type', 'target_id'])
    op.create_index('ix_ratings_from_user_id', 'ratings', ['from_user_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_ratings_from_user_id', table_name='ratings')
    op.drop_index('ix_ratings_target', table_name='ratings')
    op.drop_table('ratings')

    op.drop_index('ix_rentals_start_date', table_name='rentals')
    op.drop_index('ix_rentals_status', table_name='rentals')
    op.drop_index('ix_rentals_outfit_id', table_name='rentals')
    op.drop_index('ix_rentals_owner_id', table_name='rentals')
    op.drop_index('ix_rentals_renter_id', table_name='rentals')
    op.drop_table('rentals')

    op.drop_index('ix_outfits_lat_lon', table_name='outfits')
    op.drop_index('ix_outfits_available_price', table_name='outfits')
    op.drop_index('ix_outfits_rating', table_name='outfits')
    op.drop_index('ix_outfits_created_at', table_name='outfits')
    op.drop_index('ix_outfits_size', table_name='outfits')
    op.drop_index('ix_outfits_category', table_name='outfits')
    op.drop_index('ix_outfits_owner_id', table_name='outfits')
    op.drop_table('outfits')

    op.drop_table('users')
