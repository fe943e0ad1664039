"""create_signage_tables

Revision ID: 3f1c2a9d7b40
Revises:
Create Date: 2026-10-19 10:12:41.208114

"""
from alembic import op
import sqlalchemy as sa
import sqlmodel.sql.sqltypes


# revision identifiers, used by Alembic.
revision = '3f1c2a9d7b40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'user',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('username', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column('full_name', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column('avatar_url', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_superuser', sa.Boolean(), nullable=False),
        sa.Column('hashed_password', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_user_email'), 'user', ['email'], unique=True)

    op.create_table(
        'ad',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('type', sa.Enum('IMAGE', 'VIDEO', name='adtype'), nullable=False),
        sa.Column('url', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('external_link', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_ad_is_active'), 'ad', ['is_active'], unique=False)
    op.create_index(op.f('ix_ad_created_at'), 'ad', ['created_at'], unique=False)

    op.create_table(
        'news',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('url', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('image_url', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('source', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column('published_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_news_published_at'), 'news', ['published_at'], unique=False)
    op.create_index(op.f('ix_news_created_at'), 'news', ['created_at'], unique=False)

    op.create_table(
        'device',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('phone_number', sqlmodel.sql.sqltypes.AutoString(length=32), nullable=True),
        sa.Column('pin', sqlmodel.sql.sqltypes.AutoString(length=4), nullable=True),
        sa.Column('last_active', sa.DateTime(), nullable=True),
        sa.Column('force_refresh', sa.Boolean(), nullable=False),
        sa.Column('force_refresh_timestamp', sa.DateTime(), nullable=True),
        sa.Column('last_ping_attempt', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_device_name'), 'device', ['name'], unique=False)
    op.create_index(op.f('ix_device_pin'), 'device', ['pin'], unique=False)

    op.create_table(
        'pingrequest',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('device_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('status', sa.Enum('PENDING', 'COMPLETED', 'FAILED', name='pingstatus'), nullable=False),
        sa.Column('location', sa.JSON(), nullable=True),
        sa.Column('battery_level', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('error_message', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['device_id'], ['device.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_pingrequest_device_id'), 'pingrequest', ['device_id'], unique=False)
    op.create_index(op.f('ix_pingrequest_status'), 'pingrequest', ['status'], unique=False)
    op.create_index(op.f('ix_pingrequest_created_at'), 'pingrequest', ['created_at'], unique=False)

    op.create_table(
        'adinteraction',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('ad_id', sa.Uuid(), nullable=False),
        sa.Column('device_id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column(
            'interaction_type',
            sa.Enum('IMPRESSION', 'LINK_CLICK', 'READ_MORE_CLICK', name='interactiontype'),
            nullable=False,
        ),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.Column('coordinates', sa.JSON(), nullable=True),
        sa.ForeignKeyConstraint(['ad_id'], ['ad.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_adinteraction_ad_id'), 'adinteraction', ['ad_id'], unique=False)
    op.create_index(op.f('ix_adinteraction_device_id'), 'adinteraction', ['device_id'], unique=False)
    op.create_index(op.f('ix_adinteraction_interaction_type'), 'adinteraction', ['interaction_type'], unique=False)
    op.create_index(op.f('ix_adinteraction_timestamp'), 'adinteraction', ['timestamp'], unique=False)

    op.create_table(
        'setting',
        sa.Column('key', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('value', sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint('key'),
    )


def downgrade():
    op.drop_table('setting')
    op.drop_table('adinteraction')
    op.drop_table('pingrequest')
    op.drop_table('device')
    op.drop_table('news')
    op.drop_table('ad')
    op.drop_table('user')
