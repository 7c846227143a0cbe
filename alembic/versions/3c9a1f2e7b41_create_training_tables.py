"""create_training_tables

Revision ID: 3c9a1f2e7b41
Revises:
Create Date: 2026-10-19 09:12:44.518203

"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op


# revision identifiers, used by Alembic.
revision: str = '3c9a1f2e7b41'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'settings',
        sa.Column('key', sa.String(100), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint('key'),
    )

    op.create_table(
        'training_sessions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('mode', sa.String(100), nullable=False),
        sa.Column('language', sa.String(50), nullable=False),
        sa.Column('scenario', sa.Text(), nullable=False),
        sa.Column('scenario_context', sa.Text(), nullable=False),
        sa.Column('ideal_resolution', sa.Text(), nullable=False),
        sa.Column('scenario_details', sa.JSON(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('score', sa.Float(), nullable=True),
        sa.Column('analysis', sa.JSON(), nullable=True),
        sa.Column('suggestions', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_training_sessions_status'), 'training_sessions', ['status'])
    op.create_index(op.f('ix_training_sessions_created_at'), 'training_sessions', ['created_at'])
    op.create_index(
        op.f('ix_training_sessions_completed_at'), 'training_sessions', ['completed_at']
    )

    op.create_table(
        'messages',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('session_id', sa.Uuid(), nullable=False),
        sa.Column('sequence', sa.Integer(), nullable=False),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['session_id'], ['training_sessions.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('session_id', 'sequence', name='uq_messages_session_sequence'),
    )
    op.create_index(op.f('ix_messages_session_id'), 'messages', ['session_id'])


def downgrade() -> None:
    op.drop_index(op.f('ix_messages_session_id'), table_name='messages')
    op.drop_table('messages')
    op.drop_index(op.f('ix_training_sessions_completed_at'), table_name='training_sessions')
    op.drop_index(op.f('ix_training_sessions_created_at'), table_name='training_sessions')
    op.drop_index(op.f('ix_training_sessions_status'), table_name='training_sessions')
    op.drop_table('training_sessions')
    op.drop_table('settings')
