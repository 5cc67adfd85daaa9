"""initial schema: users, teams, memberships and scoped resources

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

team_role = sa.Enum('ADMIN', 'EDITOR', 'VIEWER', name='teamrole')
frequency_type = sa.Enum('daily', 'weekly', 'monthly', 'yearly', name='frequencytype')


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('hashed_password', sa.String(length=1024), nullable=False),
        sa.Column('is_active', sa.Boolean, nullable=False),
        sa.Column('is_superuser', sa.Boolean, nullable=False),
        sa.Column('is_verified', sa.Boolean, nullable=False),
        sa.Column('full_name', sa.String, nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'teams',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
    )

    op.create_table(
        'team_members',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.Uuid(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('team_id', sa.Uuid(as_uuid=True), sa.ForeignKey('teams.id', ondelete='CASCADE'), nullable=False),
        sa.Column('role', team_role, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.UniqueConstraint('user_id', 'team_id', name='uq_team_member_user_team'),
    )
    op.create_index('ix_team_members_user_id', 'team_members', ['user_id'])
    op.create_index('ix_team_members_team_id', 'team_members', ['team_id'])

    op.create_table(
        'categories',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.Uuid(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=True),
        sa.Column('team_id', sa.Uuid(as_uuid=True), sa.ForeignKey('teams.id', ondelete='CASCADE'), nullable=True),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('color', sa.String(length=7), nullable=False),
        sa.Column('icon', sa.String(length=50), nullable=True),
        sa.Column('is_default', sa.Boolean, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
        sa.CheckConstraint(
            "(is_default AND user_id IS NULL AND team_id IS NULL) OR "
            "(NOT is_default AND ((user_id IS NOT NULL AND team_id IS NULL) OR "
            "(user_id IS NULL AND team_id IS NOT NULL)))",
            name='ck_category_single_owner',
        ),
    )
    op.create_index('ix_categories_user_id', 'categories', ['user_id'])
    op.create_index('ix_categories_team_id', 'categories', ['team_id'])

    op.create_table(
        'expenses',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.Uuid(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('team_id', sa.Uuid(as_uuid=True), sa.ForeignKey('teams.id', ondelete='CASCADE'), nullable=True),
        sa.Column('category_id', sa.Uuid(as_uuid=True), sa.ForeignKey('categories.id'), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=False),
        sa.Column('date', sa.DateTime, nullable=False),
        sa.Column('receipt_url', sa.String(length=2048), nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
    )
    op.create_index('ix_expenses_user_id', 'expenses', ['user_id'])
    op.create_index('ix_expenses_team_id', 'expenses', ['team_id'])
    op.create_index('ix_expenses_category_id', 'expenses', ['category_id'])

    op.create_table(
        'budgets',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.Uuid(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=True),
        sa.Column('team_id', sa.Uuid(as_uuid=True), sa.ForeignKey('teams.id', ondelete='CASCADE'), nullable=True),
        sa.Column('category_id', sa.Uuid(as_uuid=True), sa.ForeignKey('categories.id'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=True),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('start_date', sa.Date, nullable=False),
        sa.Column('end_date', sa.Date, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
        sa.CheckConstraint(
            "(user_id IS NOT NULL AND team_id IS NULL) OR (user_id IS NULL AND team_id IS NOT NULL)",
            name='ck_budget_single_owner',
        ),
        sa.CheckConstraint('start_date <= end_date', name='ck_budget_date_range'),
    )
    op.create_index('ix_budgets_user_id', 'budgets', ['user_id'])
    op.create_index('ix_budgets_team_id', 'budgets', ['team_id'])
    op.create_index('ix_budgets_category_id', 'budgets', ['category_id'])

    op.create_table(
        'recurring_expenses',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.Uuid(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('team_id', sa.Uuid(as_uuid=True), sa.ForeignKey('teams.id', ondelete='CASCADE'), nullable=True),
        sa.Column('category_id', sa.Uuid(as_uuid=True), sa.ForeignKey('categories.id'), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=False),
        sa.Column('frequency', frequency_type, nullable=False),
        sa.Column('next_due_date', sa.DateTime, nullable=False),
        sa.Column('is_active', sa.Boolean, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
    )
    op.create_index('ix_recurring_expenses_user_id', 'recurring_expenses', ['user_id'])
    op.create_index('ix_recurring_expenses_team_id', 'recurring_expenses', ['team_id'])
    op.create_index('ix_recurring_expenses_category_id', 'recurring_expenses', ['category_id'])


def downgrade():
    op.drop_table('recurring_expenses')
    op.drop_table('budgets')
    op.drop_table('expenses')
    op.drop_table('categories')
    op.drop_table('team_members')
    op.drop_table('teams')
    op.drop_table('users')
    frequency_type.drop(op.get_bind(), checkfirst=True)
    team_role.drop(op.get_bind(), checkfirst=True)
