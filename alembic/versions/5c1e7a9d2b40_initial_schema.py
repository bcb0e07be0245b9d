"""initial_schema

Revision ID: 5c1e7a9d2b40
Revises:
Create Date: 2026-02-02 12:00:00.000000

Users, subscriptions and jobs. Only creates tables that do not exist yet, so
it can be applied to a database that was bootstrapped with create_all.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '5c1e7a9d2b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    if not table_exists('users'):
        op.create_table('users',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('email', sa.String(length=255), nullable=False),
            sa.Column('username', sa.String(length=100), nullable=True),
            sa.Column('password_hash', sa.String(), nullable=False),
            sa.Column('name', sa.String(length=200), nullable=False),
            sa.Column('role', sa.String(length=20), nullable=False),
            sa.Column('company_name', sa.String(length=200), nullable=True),
            sa.Column('license_category', sa.String(length=50), nullable=True),
            sa.Column('location', sa.String(length=200), nullable=True),
            sa.Column('experience', sa.String(length=200), nullable=True),
            sa.Column('categories', sa.JSON(), nullable=False),
            sa.Column('rating', sa.Float(), nullable=False),
            sa.Column('bio', sa.Text(), nullable=False),
            sa.Column('verified', sa.Boolean(), nullable=False),
            sa.Column('trips', sa.Integer(), nullable=False),
            sa.Column('phone', sa.String(length=50), nullable=False),
            sa.Column('work_zone', sa.String(length=200), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
        op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
        op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)
        op.create_index(op.f('ix_users_role'), 'users', ['role'], unique=False)
        op.create_index(op.f('ix_users_created_at'), 'users', ['created_at'], unique=False)

    if not table_exists('subscriptions'):
        op.create_table('subscriptions',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('plan', sa.String(length=20), nullable=False),
            sa.Column('status', sa.String(length=20), nullable=False),
            sa.Column('job_limit', sa.Integer(), nullable=False),
            sa.Column('price_gel', sa.Integer(), nullable=False),
            sa.Column('activated_at', sa.DateTime(timezone=True), nullable=True),
            sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_subscriptions_id'), 'subscriptions', ['id'], unique=False)
        op.create_index(op.f('ix_subscriptions_user_id'), 'subscriptions', ['user_id'], unique=False)
        op.create_index(op.f('ix_subscriptions_status'), 'subscriptions', ['status'], unique=False)
        op.create_index('idx_subscriptions_user_status', 'subscriptions', ['user_id', 'status'], unique=False)
        # At most one active subscription per owner
        op.create_index(
            'uq_subscriptions_one_active_per_user',
            'subscriptions',
            ['user_id'],
            unique=True,
            sqlite_where=sa.text("status = 'active'"),
            postgresql_where=sa.text("status = 'active'"),
        )

    if not table_exists('jobs'):
        op.create_table('jobs',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('title', sa.String(length=255), nullable=False),
            sa.Column('route', sa.String(length=255), nullable=False),
            sa.Column('price', sa.String(length=100), nullable=False),
            sa.Column('type', sa.String(length=100), nullable=False),
            sa.Column('date', sa.String(length=100), nullable=False),
            sa.Column('description', sa.Text(), nullable=False),
            sa.Column('requirements', sa.JSON(), nullable=False),
            sa.Column('owner', sa.String(length=200), nullable=False),
            sa.Column('phone', sa.String(length=50), nullable=False),
            sa.Column('created_by', sa.Integer(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='SET NULL'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_jobs_id'), 'jobs', ['id'], unique=False)
        op.create_index(op.f('ix_jobs_type'), 'jobs', ['type'], unique=False)
        op.create_index(op.f('ix_jobs_created_by'), 'jobs', ['created_by'], unique=False)
        op.create_index(op.f('ix_jobs_created_at'), 'jobs', ['created_at'], unique=False)
        op.create_index('idx_jobs_created_by_created', 'jobs', ['created_by', 'created_at'], unique=False)


def downgrade() -> None:
    op.drop_table('jobs')
    op.drop_table('subscriptions')
    op.drop_table('users')
