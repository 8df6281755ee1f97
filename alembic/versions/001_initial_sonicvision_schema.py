"""Initial SonicVision schema

Revision ID: 001_initial_sonicvision_schema
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB


# revision identifiers, used by Alembic.
revision: str = '001_initial_sonicvision_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, music_generations and image_generations"""

    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('username', sa.String(255), nullable=False, unique=True),
        sa.Column('created_at', sa.TIMESTAMP, nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'music_generations',
        sa.Column('id', sa.String(36), primary_key=True),

        # Request
        sa.Column('prompt', sa.Text, nullable=False),
        sa.Column('style', sa.Text, nullable=True),
        sa.Column('title', sa.String(255), nullable=True),
        sa.Column('model', sa.String(20), nullable=False, server_default='V5'),
        sa.Column('instrumental', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('duration', sa.Integer, nullable=True),

        # Provider state
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('task_id', sa.String(255), nullable=True),
        sa.Column('audio_url', sa.Text, nullable=True),
        sa.Column('image_url', sa.Text, nullable=True),
        sa.Column('error_message', sa.Text, nullable=True),
        sa.Column('metadata', JSONB, nullable=True),

        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),

        # Timestamps
        sa.Column('created_at', sa.TIMESTAMP, nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.TIMESTAMP, nullable=False, server_default=sa.func.now()),
        sa.Column('completed_at', sa.TIMESTAMP, nullable=True),
    )

    op.create_table(
        'image_generations',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('prompt', sa.Text, nullable=False),
        sa.Column('title', sa.String(255), nullable=True),
        sa.Column(
            'music_generation_id',
            sa.String(36),
            sa.ForeignKey('music_generations.id', ondelete='SET NULL'),
            nullable=True
        ),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('image_url', sa.Text, nullable=True),
        sa.Column('error_message', sa.Text, nullable=True),
        sa.Column('created_at', sa.TIMESTAMP, nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.TIMESTAMP, nullable=False, server_default=sa.func.now()),
        sa.Column('completed_at', sa.TIMESTAMP, nullable=True),
    )

    # Newest-first listing per owner
    op.create_index('ix_music_generations_user_created', 'music_generations', ['user_id', 'created_at'])
    op.create_index('ix_music_generations_status', 'music_generations', ['status'])
    op.create_index('ix_image_generations_user_created', 'image_generations', ['user_id', 'created_at'])
    op.create_index('ix_image_generations_music_generation_id', 'image_generations', ['music_generation_id'])


def downgrade() -> None:
    """Drop SonicVision tables"""

    op.drop_index('ix_image_generations_music_generation_id', table_name='image_generations')
    op.drop_index('ix_image_generations_user_created', table_name='image_generations')
    op.drop_index('ix_music_generations_status', table_name='music_generations')
    op.drop_index('ix_music_generations_user_created', table_name='music_generations')

    op.drop_table('image_generations')
    op.drop_table('music_generations')
    op.drop_table('users')
