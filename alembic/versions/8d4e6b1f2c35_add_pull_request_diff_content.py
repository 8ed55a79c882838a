"""add pull request diff content

Revision ID: 8d4e6b1f2c35
Revises: 3f1c2a9d8b70
Create Date: 2026-10-19 09:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8d4e6b1f2c35'
down_revision: Union[str, Sequence[str], None] = '3f1c2a9d8b70'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Add diff_content column for cached unified diffs."""
    with op.batch_alter_table('pull_requests') as batch_op:
        batch_op.add_column(sa.Column('diff_content', sa.Text(), nullable=True))


def downgrade() -> None:
    """Remove diff_content column."""
    with op.batch_alter_table('pull_requests') as batch_op:
        batch_op.drop_column('diff_content')
