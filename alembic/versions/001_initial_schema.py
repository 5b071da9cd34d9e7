"""initial_schema_urls_results_broken_links

Revision ID: 001
Revises: 
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

url_status = sa.Enum('queued', 'running', 'completed', 'failed', name='urlstatus')


def upgrade() -> None:
    """Upgrade schema."""
    # Create urls table
    op.create_table(
        'urls',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('url', sa.String(2048), nullable=False),
        sa.Column('status', url_status, nullable=False),
        sa.Column('celery_task_id', sa.String(128), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_urls_id'), 'urls', ['id'], unique=False)
    op.create_index(op.f('ix_urls_status'), 'urls', ['status'], unique=False)
    op.create_index('idx_urls_created_at', 'urls', ['created_at'], unique=False)

    # Create crawl_results table
    op.create_table(
        'crawl_results',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('url_id', sa.String(), nullable=False),
        sa.Column('title', sa.Text(), nullable=True),
        sa.Column('html_version', sa.String(20), nullable=True),
        sa.Column('h1_count', sa.Integer(), nullable=False),
        sa.Column('h2_count', sa.Integer(), nullable=False),
        sa.Column('h3_count', sa.Integer(), nullable=False),
        sa.Column('h4_count', sa.Integer(), nullable=False),
        sa.Column('h5_count', sa.Integer(), nullable=False),
        sa.Column('h6_count', sa.Integer(), nullable=False),
        sa.Column('internal_links', sa.Integer(), nullable=False),
        sa.Column('external_links', sa.Integer(), nullable=False),
        sa.Column('inaccessible_links', sa.Integer(), nullable=False),
        sa.Column('has_login_form', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['url_id'], ['urls.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_crawl_results_id'), 'crawl_results', ['id'], unique=False)
    op.create_index(op.f('ix_crawl_results_url_id'), 'crawl_results', ['url_id'], unique=True)

    # Create broken_links table
    op.create_table(
        'broken_links',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('result_id', sa.String(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('url', sa.String(2048), nullable=False),
        sa.Column('status_code', sa.Integer(), nullable=False),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['result_id'], ['crawl_results.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_broken_links_id'), 'broken_links', ['id'], unique=False)
    op.create_index(op.f('ix_broken_links_result_id'), 'broken_links', ['result_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_broken_links_result_id'), table_name='broken_links')
    op.drop_index(op.f('ix_broken_links_id'), table_name='broken_links')
    op.drop_table('broken_links')
    op.drop_index(op.f('ix_crawl_results_url_id'), table_name='crawl_results')
    op.drop_index(op.f('ix_crawl_results_id'), table_name='crawl_results')
    op.drop_table('crawl_results')
    op.drop_index('idx_urls_created_at', table_name='urls')
    op.drop_index(op.f('ix_urls_status'), table_name='urls')
    op.drop_index(op.f('ix_urls_id'), table_name='urls')
    op.drop_table('urls')
    url_status.drop(op.get_bind(), checkfirst=True)
