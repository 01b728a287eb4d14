"""create game, tournament_result and match_record tables

Revision ID: 5b7e2c1d9a40
Revises:
Create Date: 2025-11-02 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5b7e2c1d9a40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'game',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('player_name', sa.String(length=64), nullable=False),
        sa.Column('difficulty', sa.String(length=16), nullable=False),
        sa.Column('mode', sa.String(length=16), nullable=False),
        sa.Column('seed', sa.BigInteger(), nullable=False),
        sa.Column('puzzle', sa.Text(), nullable=False),
        sa.Column('solution', sa.Text(), nullable=False),
        sa.Column('user_board', sa.Text(), nullable=False),
        sa.Column('move_history', sa.Text(), nullable=True),
        sa.Column('completed', sa.Boolean(), nullable=False),
        sa.Column('failed', sa.Boolean(), nullable=False),
        sa.Column('time', sa.Integer(), nullable=True),
        sa.Column('mistakes', sa.Integer(), nullable=False),
        sa.Column('hints_used', sa.Integer(), nullable=False),
        sa.Column('time_limit', sa.Integer(), nullable=True),
        sa.Column('daily_challenge_date', sa.String(length=10), nullable=True),
        sa.Column('tournament_level', sa.String(length=16), nullable=True),
        sa.Column('created_at', sa.Float(), nullable=False),
        sa.Column('completed_at', sa.Float(), nullable=True),
    )
    op.create_index('ix_game_player_name', 'game', ['player_name'])
    op.create_index('ix_game_daily_challenge_date', 'game', ['daily_challenge_date'])

    op.create_table(
        'tournament_result',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('player_name', sa.String(length=64), nullable=False),
        sa.Column('level_key', sa.String(length=16), nullable=False),
        sa.Column('stars', sa.Integer(), nullable=False),
        sa.Column('time', sa.Integer(), nullable=False),
        sa.Column('mistakes', sa.Integer(), nullable=False),
        sa.Column('completed_at', sa.Float(), nullable=False),
        sa.UniqueConstraint('player_name', 'level_key', name='uq_tournament_player_level'),
    )
    op.create_index('ix_tournament_result_player_name', 'tournament_result', ['player_name'])

    op.create_table(
        'match_record',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('room_code', sa.String(length=12), nullable=False),
        sa.Column('difficulty', sa.String(length=16), nullable=False),
        sa.Column('seed', sa.BigInteger(), nullable=False),
        sa.Column('winner_id', sa.String(length=64), nullable=True),
        sa.Column('winner_handle', sa.String(length=64), nullable=True),
        sa.Column('winner_time', sa.Integer(), nullable=True),
        sa.Column('winner_mistakes', sa.Integer(), nullable=True),
        sa.Column('players', sa.Text(), nullable=False),
        sa.Column('rounds', sa.Text(), nullable=True),
        sa.Column('started_at', sa.Float(), nullable=True),
        sa.Column('finished_at', sa.Float(), nullable=True),
    )
    op.create_index('ix_match_record_room_code', 'match_record', ['room_code'])


def downgrade():
    op.drop_index('ix_match_record_room_code', table_name='match_record')
    op.drop_table('match_record')
    op.drop_index('ix_tournament_result_player_name', table_name='tournament_result')
    op.drop_table('tournament_result')
    op.drop_index('ix_game_daily_challenge_date', table_name='game')
    op.drop_index('ix_game_player_name', table_name='game')
    op.drop_table('game')
