"""Create the documents table backing the document store

Revision ID: 3a1f9c2d7b40
Revises:
Create Date: 2025-03-02 10:15:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3a1f9c2d7b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """One row per document, addressed by its full key path."""
    op.create_table(
        'documents',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('path', sa.String(), nullable=False),
        sa.Column('collection_path', sa.String(), nullable=False),
        sa.Column('doc_id', sa.String(), nullable=False),
        sa.Column('data', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_documents_path', 'documents', ['path'], unique=True)
    op.create_index('ix_documents_collection_path', 'documents', ['collection_path'])
    op.create_index('ix_documents_created_at', 'documents', ['created_at'])


def downgrade() -> None:
    """Drop the documents table."""
    op.drop_index('ix_documents_created_at', table_name='documents')
    op.drop_index('ix_documents_collection_path', table_name='documents')
    op.drop_index('ix_documents_path', table_name='documents')
    op.drop_table('documents')
