"""add mode to leaderboard_entry

Revision ID: 7d4e2f8a9b31
Revises: 3a1c9e7b2d10
Create Date: 2025-09-20 15:05:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '7d4e2f8a9b31'
down_revision = '3a1c9e7b2d10'
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    cols = {c['name'] for c in insp.get_columns('leaderboard_entry')}
    # Existing rows keep NULL and are read as 'normal'
    with op.batch_alter_table('leaderboard_entry') as batch_op:
        if 'mode' not in cols:
            batch_op.add_column(sa.Column('mode', sa.String(length=16), nullable=True))
            batch_op.create_index('ix_leaderboard_entry_mode', ['mode'])


def downgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    cols = {c['name'] for c in insp.get_columns('leaderboard_entry')}
    with op.batch_alter_table('leaderboard_entry') as batch_op:
        if 'mode' in cols:
            batch_op.drop_index('ix_leaderboard_entry_mode')
            batch_op.drop_column('mode')
