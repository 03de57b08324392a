"""create_route_search_tables

Revision ID: 3b9e61f0c2ad
Revises:
Create Date: 2026-02-16 03:21:01.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b9e61f0c2ad'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('searches',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('origin_name', sa.String(), nullable=False),
        sa.Column('origin_lat', sa.Float(), nullable=False),
        sa.Column('origin_lng', sa.Float(), nullable=False),
        sa.Column('destination_name', sa.String(), nullable=False),
        sa.Column('destination_lat', sa.Float(), nullable=False),
        sa.Column('destination_lng', sa.Float(), nullable=False),
        sa.Column('max_time_min', sa.Integer(), nullable=False),
        sa.Column('max_walk_min', sa.Integer(), nullable=False),
        sa.Column('result_routes', sa.JSON(), nullable=False),
        sa.Column('searched_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_searches_id'), 'searches', ['id'], unique=False)
    op.create_index(op.f('ix_searches_searched_at'), 'searches', ['searched_at'], unique=False)

    op.create_table('favorite_routes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('route_name', sa.String(), nullable=False),
        sa.Column('origin_name', sa.String(), nullable=False),
        sa.Column('origin_lat', sa.Float(), nullable=False),
        sa.Column('origin_lng', sa.Float(), nullable=False),
        sa.Column('destination_name', sa.String(), nullable=False),
        sa.Column('destination_lat', sa.Float(), nullable=False),
        sa.Column('destination_lng', sa.Float(), nullable=False),
        sa.Column('max_time_min', sa.Integer(), nullable=False),
        sa.Column('max_walk_min', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_favorite_routes_id'), 'favorite_routes', ['id'], unique=False)
    op.create_index(op.f('ix_favorite_routes_created_at'), 'favorite_routes', ['created_at'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_favorite_routes_created_at'), table_name='favorite_routes')
    op.drop_index(op.f('ix_favorite_routes_id'), table_name='favorite_routes')
    op.drop_table('favorite_routes')
    op.drop_index(op.f('ix_searches_searched_at'), table_name='searches')
    op.drop_index(op.f('ix_searches_id'), table_name='searches')
    op.drop_table('searches')
