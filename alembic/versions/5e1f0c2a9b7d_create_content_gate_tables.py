"""Create brand safety config, brand kit and generation log tables

Revision ID: 5e1f0c2a9b7d
Revises: 
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '5e1f0c2a9b7d'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _json_list(name: str) -> sa.Column:
    return sa.Column(name, postgresql.JSONB, nullable=False, server_default=sa.text("'[]'::jsonb"))


def upgrade() -> None:
    # -- 1. Per-brand compliance policy --
    op.create_table(
        'brand_safety_configs',
        sa.Column('brand_id', sa.String(255), primary_key=True),
        sa.Column('safety_mode', sa.String(20), nullable=False, server_default='safe'),
        _json_list('banned_phrases'),
        _json_list('competitor_names'),
        _json_list('claims'),
        _json_list('required_disclaimers'),
        _json_list('required_hashtags'),
        _json_list('brand_links'),
        _json_list('disallowed_topics'),
        _json_list('allow_topics'),
        sa.Column('compliance_pack', sa.String(20), nullable=False, server_default='none'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # -- 2. Brand voice kit --
    op.create_table(
        'brand_kits',
        sa.Column('brand_id', sa.String(255), primary_key=True),
        sa.Column('brand_name', sa.String(255), nullable=True),
        _json_list('tone_keywords'),
        _json_list('brand_personality'),
        sa.Column('writing_style', sa.String(255), nullable=True),
        _json_list('common_phrases'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # -- 3. Generation audit log --
    op.create_table(
        'generation_logs',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('brand_id', sa.String(255), nullable=False),
        sa.Column('agent', sa.String(20), nullable=False),
        sa.Column('prompt_version', sa.String(20), nullable=True),
        sa.Column('safety_mode', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('input', postgresql.JSONB, nullable=False),
        sa.Column('output', postgresql.JSONB, nullable=True),
        sa.Column('bfs', postgresql.JSONB, nullable=True),
        sa.Column('linter', postgresql.JSONB, nullable=True),
        sa.Column('approved', sa.Boolean, nullable=False, server_default='false'),
        sa.Column('attempts_used', sa.Integer, nullable=False, server_default='0'),
        sa.Column('duration_ms', sa.Integer, nullable=False, server_default='0'),
        sa.Column('tokens_in', sa.Integer, nullable=False, server_default='0'),
        sa.Column('tokens_out', sa.Integer, nullable=False, server_default='0'),
        sa.Column('provider', sa.String(50), nullable=False, server_default='unknown'),
        sa.Column('model', sa.String(100), nullable=False, server_default='unknown'),
        sa.Column('request_id', sa.String(64), nullable=False, unique=True),
        sa.Column('error', sa.Text, nullable=True),
        sa.Column('reviewer_id', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_generation_logs_brand_id', 'generation_logs', ['brand_id'])
    op.create_index('ix_generation_logs_created_at', 'generation_logs', ['created_at'])


def downgrade() -> None:
    op.drop_index('ix_generation_logs_created_at', table_name='generation_logs')
    op.drop_index('ix_generation_logs_brand_id', table_name='generation_logs')
    op.drop_table('generation_logs')
    op.drop_table('brand_kits')
    op.drop_table('brand_safety_configs')
