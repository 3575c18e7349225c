"""create access control schema

Revision ID: a3c91e7d5b20
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a3c91e7d5b20'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('username', sa.String(length=80), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('card_number', sa.String(length=64), nullable=True),
        sa.Column('pin_hash', sa.String(length=255), nullable=True),
        sa.Column('disabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('pin_disabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('last_access', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username'),
    )
    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.create_index('ix_users_card_number', ['card_number'], unique=False)

    op.create_table(
        'doors',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('disabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('access_count', sa.Integer(), nullable=True),
        sa.Column('last_access', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'controller_api_keys',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('controller_name', sa.String(length=200), nullable=False),
        sa.Column('api_key', sa.String(length=128), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_by_id', sa.String(length=36), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('revoked_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['created_by_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('api_key'),
    )
    with op.batch_alter_table('controller_api_keys', schema=None) as batch_op:
        batch_op.create_index('ix_controller_api_keys_active', ['api_key', 'is_active'], unique=False)

    op.create_table(
        'access_logs',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('card_number', sa.String(length=64), nullable=True),
        sa.Column('pin_used', sa.String(length=64), nullable=True),
        sa.Column('door_id', sa.String(length=64), nullable=True),
        sa.Column('access_type', sa.String(length=64), nullable=False),
        sa.Column('controller_id', sa.String(length=36), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['controller_id'], ['controller_api_keys.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('access_logs', schema=None) as batch_op:
        batch_op.create_index('ix_access_logs_timestamp', ['timestamp'], unique=False)
        batch_op.create_index('ix_access_logs_card_number', ['card_number'], unique=False)
        batch_op.create_index('ix_access_logs_door_id', ['door_id'], unique=False)
        batch_op.create_index('ix_access_logs_controller_id', ['controller_id'], unique=False)

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('actor_user_id', sa.String(length=36), nullable=True),
        sa.Column('action', sa.String(length=80), nullable=False),
        sa.Column('entity_type', sa.String(length=80), nullable=False),
        sa.Column('entity_id', sa.String(length=36), nullable=True),
        sa.Column('ip_address', sa.String(length=64), nullable=True),
        sa.Column('user_agent', sa.String(length=255), nullable=True),
        sa.Column('details_json', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['actor_user_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('audit_logs', schema=None) as batch_op:
        batch_op.create_index('ix_audit_logs_created_at', ['created_at'], unique=False)
        batch_op.create_index('ix_audit_logs_actor', ['actor_user_id'], unique=False)
        batch_op.create_index('ix_audit_logs_action', ['action'], unique=False)


def downgrade():
    with op.batch_alter_table('audit_logs', schema=None) as batch_op:
        batch_op.drop_index('ix_audit_logs_action')
        batch_op.drop_index('ix_audit_logs_actor')
        batch_op.drop_index('ix_audit_logs_created_at')
    op.drop_table('audit_logs')

    with op.batch_alter_table('access_logs', schema=None) as batch_op:
        batch_op.drop_index('ix_access_logs_controller_id')
        batch_op.drop_index('ix_access_logs_door_id')
        batch_op.drop_index('ix_access_logs_card_number')
        batch_op.drop_index('ix_access_logs_timestamp')
    op.drop_table('access_logs')

    with op.batch_alter_table('controller_api_keys', schema=None) as batch_op:
        batch_op.drop_index('ix_controller_api_keys_active')
    op.drop_table('controller_api_keys')

    op.drop_table('doors')

    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.drop_index('ix_users_card_number')
    op.drop_table('users')
