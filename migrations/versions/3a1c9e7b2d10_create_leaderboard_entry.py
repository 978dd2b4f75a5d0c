"""create leaderboard_entry

Revision ID: 3a1c9e7b2d10
Revises:
Create Date: 2025-09-02 10:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3a1c9e7b2d10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'leaderboard_entry',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=20), nullable=False),
        sa.Column('moves', sa.Integer(), nullable=False),
        sa.Column('time_seconds', sa.Float(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_leaderboard_entry_moves_time', 'leaderboard_entry', ['moves', 'time_seconds'])


def downgrade():
    op.drop_index('ix_leaderboard_entry_moves_time', table_name='leaderboard_entry')
    op.drop_table('leaderboard_entry')
