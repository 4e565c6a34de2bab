"""tasks.is_subtask

Revision ID: 002_task_is_subtask
Revises: 001_initial
Create Date: 2026-10-19 15:30:00.000000+01:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '002_task_is_subtask'
down_revision = '001_initial'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column(
        'tasks',
        sa.Column('is_subtask', sa.Boolean(), nullable=False, server_default=sa.true()),
    )


def downgrade() -> None:
    op.drop_column('tasks', 'is_subtask')
