"""create_jobs_table

Creates the single flat jobs table backing the job board.

Revision ID: 5f2c8a1d9e3b
Revises:
Create Date: 2026-10-18 09:12:40.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5f2c8a1d9e3b'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create jobs table."""
    op.create_table(
        'jobs',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('employer', sa.String(length=255), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('salary', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('posted_date', sa.Date(), nullable=False, server_default=sa.func.current_date()),
    )

    op.create_index('ix_jobs_id', 'jobs', ['id'])
    op.create_index('ix_jobs_title', 'jobs', ['title'])
    op.create_index('ix_jobs_location', 'jobs', ['location'])
    op.create_index('ix_jobs_posted_date', 'jobs', ['posted_date'])


def downgrade() -> None:
    """Drop jobs table."""
    op.drop_index('ix_jobs_posted_date', 'jobs')
    op.drop_index('ix_jobs_location', 'jobs')
    op.drop_index('ix_jobs_title', 'jobs')
    op.drop_index('ix_jobs_id', 'jobs')
    op.drop_table('jobs')
