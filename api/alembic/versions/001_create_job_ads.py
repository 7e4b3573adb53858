"""create_job_ads

Revision ID: 001
Revises:
Create Date: 2026-10-12 10:24:51.118204

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
    """Upgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    # init_db() pudo haber creado la tabla antes de la primera migracion
    if not inspector.has_table('job_ads'):
        op.create_table('job_ads',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('uuid', sa.String(length=255), nullable=False),
        sa.Column('title', sa.String(length=1024), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('published', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated', sa.DateTime(timezone=True), nullable=True),
        sa.Column('expires', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('synced_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_job_ads_id'), 'job_ads', ['id'], unique=False)
        op.create_index(op.f('ix_job_ads_uuid'), 'job_ads', ['uuid'], unique=True)
        op.create_index(op.f('ix_job_ads_published'), 'job_ads', ['published'], unique=False)
        op.create_index(op.f('ix_job_ads_updated'), 'job_ads', ['updated'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if inspector.has_table('job_ads'):
        for index in ('ix_job_ads_updated', 'ix_job_ads_published', 'ix_job_ads_uuid', 'ix_job_ads_id'):
            op.drop_index(op.f(index), table_name='job_ads')
        op.drop_table('job_ads')
