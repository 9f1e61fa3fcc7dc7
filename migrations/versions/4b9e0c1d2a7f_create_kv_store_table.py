"""create_kv_store_table

Revision ID: 4b9e0c1d2a7f
Revises:
Create Date: 2026-10-16 09:12:44.318205

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4b9e0c1d2a7f'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create kv_store table."""
    op.create_table('kv_store',
        sa.Column('key', sa.Text(), nullable=False),
        sa.Column('value', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.PrimaryKeyConstraint('key'),
    )
    # Prefix scans (user_profile:*, company:*) use text_pattern_ops
    op.create_index(
        'ix_kv_store_key_pattern',
        'kv_store',
        ['key'],
        unique=False,
        postgresql_ops={'key': 'text_pattern_ops'},
    )


def downgrade() -> None:
    """Drop kv_store table."""
    op.drop_index('ix_kv_store_key_pattern', table_name='kv_store')
    op.drop_table('kv_store')
