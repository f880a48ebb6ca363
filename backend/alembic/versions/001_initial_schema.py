"""Initial schema baseline

This migration creates the complete database schema for the Account
Balance Tracker.

Tables:
    - roles: Role names (Admin, User)
    - users: Login accounts
    - user_roles: Many-to-many link between users and roles
    - accounts: Ledger accounts that balances are recorded against
    - balance_records: One balance per account per (year, month)

Revision ID: 001
Revises: None
Create Date: 2025-08-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ==========================================================================
    # ROLES
    # ==========================================================================
    op.create_table(
        'roles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(50), nullable=False, unique=True),
        sa.Column('description', sa.String(255), nullable=True),
    )

    # ==========================================================================
    # USERS
    # ==========================================================================
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'user_roles',
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('role_id', sa.Integer(), sa.ForeignKey('roles.id', ondelete='CASCADE'), primary_key=True),
    )

    # ==========================================================================
    # ACCOUNTS
    # ==========================================================================
    op.create_table(
        'accounts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_accounts_name', 'accounts', ['name'], unique=True)

    # ==========================================================================
    # BALANCE RECORDS
    # ==========================================================================
    op.create_table(
        'balance_records',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('account_id', sa.Integer(), sa.ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(18, 2), nullable=False),
        sa.Column('uploaded_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('uploaded_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('account_id', 'year', 'month', name='uq_balance_record_account_period'),
    )
    op.create_index('ix_balance_records_period', 'balance_records', ['year', 'month'])
    op.create_index('ix_balance_records_uploaded_by', 'balance_records', ['uploaded_by'])


def downgrade() -> None:
    op.drop_index('ix_balance_records_uploaded_by', table_name='balance_records')
    op.drop_index('ix_balance_records_period', table_name='balance_records')
    op.drop_table('balance_records')
    op.drop_index('ix_accounts_name', table_name='accounts')
    op.drop_table('accounts')
    op.drop_table('user_roles')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
    op.drop_table('roles')
