"""create shares table

Revision ID: 3b1f0c9a7d21
Revises:
Create Date: 2025-11-20 10:02:14.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b1f0c9a7d21'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'shares',
        sa.Column('id', sa.String(length=10), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('password', sa.Text(), nullable=True),
        sa.Column('max_views', sa.Integer(), nullable=True),
        sa.Column('view_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    # 만료 정리 / 목록 정렬용 인덱스
    op.create_index('ix_shares_expires_at', 'shares', ['expires_at'])
    op.create_index('ix_shares_created_at', 'shares', ['created_at'])


def downgrade() -> None:
    op.drop_index('ix_shares_created_at')
    op.drop_index('ix_shares_expires_at')
    op.drop_table('shares')
