"""create_givetrack_schema

Revision ID: 4c1d2e7a9b30
Revises:
Create Date: 2026-10-19 09:12:44.518203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c1d2e7a9b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, workspaces, memberships, donors and donations."""
    op.create_table('users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('username', sa.String(length=100), nullable=True),
        sa.Column('display_name', sa.String(length=100), nullable=True),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )

    op.create_table('workspaces',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('created_by_id', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['created_by_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )

    # One membership per (user, workspace); the list order is created_at
    op.create_table('user_workspaces',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('workspace_id', sa.Uuid(), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "role IN ('Super Admin', 'Admin', 'Basic User', 'Volunteer')",
            name='ck_user_workspaces_role',
        ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['workspace_id'], ['workspaces.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'workspace_id', name='uq_user_workspaces_user_workspace'),
    )
    op.create_index('ix_user_workspaces_user_id', 'user_workspaces', ['user_id'], unique=False)
    op.create_index('ix_user_workspaces_workspace_id', 'user_workspaces', ['workspace_id'], unique=False)

    for table in ('contacts', 'businesses'):
        op.create_table(table,
            sa.Column('id', sa.Uuid(), nullable=False),
            sa.Column('workspace_id', sa.Uuid(), nullable=False),
            sa.Column('name', sa.String(length=255), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(['workspace_id'], ['workspaces.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index(f'ix_{table}_workspace_id', table, ['workspace_id'], unique=False)

    op.create_table('donations',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('workspace_id', sa.Uuid(), nullable=False),
        sa.Column('contact_id', sa.Uuid(), nullable=True),
        sa.Column('business_id', sa.Uuid(), nullable=True),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('status', sa.String(length=50), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('payment_type', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('(contact_id IS NULL) <> (business_id IS NULL)', name='ck_donations_single_donor'),
        sa.CheckConstraint('amount > 0', name='ck_donations_amount_positive'),
        sa.ForeignKeyConstraint(['workspace_id'], ['workspaces.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['contact_id'], ['contacts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['business_id'], ['businesses.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_donations_workspace_id', 'donations', ['workspace_id'], unique=False)
    op.create_index('ix_donations_contact_id', 'donations', ['contact_id'], unique=False)
    op.create_index('ix_donations_business_id', 'donations', ['business_id'], unique=False)


def downgrade() -> None:
    """Drop every table created above."""
    op.drop_index('ix_donations_business_id', table_name='donations')
    op.drop_index('ix_donations_contact_id', table_name='donations')
    op.drop_index('ix_donations_workspace_id', table_name='donations')
    op.drop_table('donations')

    for table in ('businesses', 'contacts'):
        op.drop_index(f'ix_{table}_workspace_id', table_name=table)
        op.drop_table(table)

    op.drop_index('ix_user_workspaces_workspace_id', table_name='user_workspaces')
    op.drop_index('ix_user_workspaces_user_id', table_name='user_workspaces')
    op.drop_table('user_workspaces')
    op.drop_table('workspaces')
    op.drop_table('users')
