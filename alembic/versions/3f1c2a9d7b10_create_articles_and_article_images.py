"""create articles and article_images

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-19 10:12:44.318205

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'articles',
        sa.Column('pk', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('expiration_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('image_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('image_count >= 0', name='ck_articles_image_count'),
        sa.PrimaryKeyConstraint('pk'),
    )
    op.create_index('ix_articles_id', 'articles', ['id'], unique=True)
    op.create_index('ix_articles_image_count', 'articles', ['image_count'])

    op.create_table(
        'article_images',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('path', sa.String(length=1024), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('article_pk', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['article_pk'], ['articles.pk'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('article_pk', 'position', name='uq_article_images_slot'),
        sa.UniqueConstraint('article_pk', 'path', name='uq_article_images_path'),
        sa.CheckConstraint('position >= 0', name='ck_article_images_position'),
    )
    op.create_index('ix_article_images_article_pk', 'article_images', ['article_pk'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_article_images_article_pk', table_name='article_images')
    op.drop_table('article_images')
    op.drop_index('ix_articles_image_count', table_name='articles')
    op.drop_index('ix_articles_id', table_name='articles')
    op.drop_table('articles')
