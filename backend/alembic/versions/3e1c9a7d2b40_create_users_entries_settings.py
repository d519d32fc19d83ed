"""create users, entries and settings tables

Revision ID: 3e1c9a7d2b40
Revises:
Create Date: 2026-01-05 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3e1c9a7d2b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    tables = inspector.get_table_names()

    if 'users' not in tables:
        op.create_table(
            'users',
            sa.Column('id', sa.String(36), primary_key=True, nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('password_hash', sa.String(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        )
        op.create_index('ix_users_email', 'users', ['email'], unique=True)

    if 'entries' not in tables:
        op.create_table(
            'entries',
            sa.Column('id', sa.String(36), primary_key=True, nullable=False),
            sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
            sa.Column('ymd', sa.String(10), nullable=False),
            sa.Column('date', sa.DateTime(timezone=True), nullable=False),
            sa.Column('pushups', sa.Integer(), server_default='0', nullable=False),
            sa.Column('run_km', sa.Float(), server_default='0', nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.UniqueConstraint('user_id', 'ymd', name='uq_entries_user_ymd'),
        )
        op.create_index('ix_entries_user_id', 'entries', ['user_id'])
        op.create_index('ix_entries_date', 'entries', ['date'])

    if 'settings' not in tables:
        op.create_table(
            'settings',
            sa.Column('id', sa.String(36), primary_key=True, nullable=False),
            sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
            sa.Column('pushups_goal', sa.Float(), nullable=True),
            sa.Column('run_km_goal', sa.Float(), nullable=True),
        )
        op.create_index('ix_settings_user_id', 'settings', ['user_id'], unique=True)


def downgrade() -> None:
    # Safe drop if exists
    op.execute('DROP TABLE IF EXISTS settings')
    op.execute('DROP TABLE IF EXISTS entries')
    op.execute('DROP TABLE IF EXISTS users')
