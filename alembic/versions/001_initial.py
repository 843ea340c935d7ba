"""Initial migration - users and activities

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(100), nullable=True),
        sa.Column('image', sa.String(500), nullable=True),
        sa.Column('password_hash', sa.String(255), nullable=True),
        sa.Column('strava_access_token', sa.Text(), nullable=True),
        sa.Column('strava_refresh_token', sa.Text(), nullable=True),
        sa.Column('strava_token_expires_at', sa.Integer(), nullable=True),
        sa.Column('strava_connected', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('strava_athlete_id', sa.BigInteger(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_strava_athlete_id', 'users', ['strava_athlete_id'])

    op.create_table(
        'activities',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('strava_id', sa.BigInteger(), nullable=False),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('activity_type', sa.String(50), nullable=False),
        sa.Column('distance_m', sa.Float(), nullable=False),
        sa.Column('moving_time_s', sa.Integer(), nullable=False),
        sa.Column('elapsed_time_s', sa.Integer(), nullable=False),
        sa.Column('elevation_gain_m', sa.Float(), nullable=True),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('timezone', sa.String(100), nullable=False),
        sa.Column('location_city', sa.String(255), nullable=True),
        sa.Column('location_state', sa.String(255), nullable=True),
        sa.Column('location_country', sa.String(255), nullable=True),
        sa.Column('raw_data', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_activities_strava_id', 'activities', ['strava_id'], unique=True)
    op.create_index('ix_activities_user_id', 'activities', ['user_id'])
    op.create_index(
        'ix_activities_user_start_date',
        'activities',
        ['user_id', sa.text('start_date DESC')],
    )


def downgrade() -> None:
    op.drop_index('ix_activities_user_start_date', table_name='activities')
    op.drop_index('ix_activities_user_id', table_name='activities')
    op.drop_index('ix_activities_strava_id', table_name='activities')
    op.drop_table('activities')
    op.drop_index('ix_users_strava_athlete_id', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
