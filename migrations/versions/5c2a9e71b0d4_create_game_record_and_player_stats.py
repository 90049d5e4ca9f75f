"""create game_record and player_stats

Revision ID: 5c2a9e71b0d4
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2a9e71b0d4'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'player_stats' not in existing_tables:
        op.create_table(
            'player_stats',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('username', sa.String(length=64), nullable=False),
            sa.Column('matches_played', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('wins', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('total_score', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('created_at', sa.DateTime(), nullable=True),
        )
        op.create_index('ix_player_stats_username', 'player_stats', ['username'], unique=True)

    if 'game_record' not in existing_tables:
        op.create_table(
            'game_record',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('room_code', sa.String(length=16), nullable=False),
            sa.Column('players', sa.Text(), nullable=False),
            sa.Column('winner', sa.String(length=64), nullable=False),
            sa.Column('score', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('breakdown', sa.Text(), nullable=True),
            sa.Column('started_at', sa.DateTime(), nullable=True),
            sa.Column('ended_at', sa.DateTime(), nullable=True),
        )
        op.create_index('ix_game_record_room_code', 'game_record', ['room_code'])


def downgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'game_record' in existing_tables:
        op.drop_index('ix_game_record_room_code', table_name='game_record')
        op.drop_table('game_record')
    if 'player_stats' in existing_tables:
        op.drop_index('ix_player_stats_username', table_name='player_stats')
        op.drop_table('player_stats')
