"""initial tagging schema

Revision ID: 001
Revises:
Create Date: 2025-09-10 18:33:14.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create documents, content, tags and document_tags tables."""
    op.create_table(
        'documents',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('owner_id', sa.String(255), index=True),
        sa.Column('filename', sa.String(500), nullable=False),
        sa.Column('file_kind', sa.String(20), nullable=False, server_default='other'),
        sa.Column('size_bytes', sa.BigInteger),
        sa.Column('storage_path', sa.String(1000)),
        sa.Column('uploaded_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('idx_documents_uploaded_at', 'documents', ['uploaded_at'])

    op.create_table(
        'document_contents',
        sa.Column('document_id', sa.Integer, primary_key=True),
        sa.Column('indexed_text', sa.Text, nullable=False, server_default=''),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['document_id'], ['documents.id'], ondelete='CASCADE'),
    )

    # Names are stored lower-cased, so a plain unique constraint is case-insensitive
    op.create_table(
        'tags',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('name', name='uq_tags_name'),
    )

    op.create_table(
        'document_tags',
        sa.Column('document_id', sa.Integer, primary_key=True),
        sa.Column('tag_id', sa.Integer, primary_key=True),
        sa.ForeignKeyConstraint(['document_id'], ['documents.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tag_id'], ['tags.id'], ondelete='CASCADE'),
    )


def downgrade() -> None:
    """Drop the tagging schema."""
    op.drop_table('document_tags')
    op.drop_table('tags')
    op.drop_table('document_contents')
    op.drop_index('idx_documents_uploaded_at', table_name='documents')
    op.drop_table('documents')
