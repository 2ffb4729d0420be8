"""Initial migration with users, financial_profiles and saved_calculations tables

Revision ID: 3f9c1d2e7a10
Revises: 
Create Date: 2026-10-19 09:12:40.512318

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c1d2e7a10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema - Create users, financial_profiles and saved_calculations tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)

    op.create_table(
        'financial_profiles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('annual_income', sa.Numeric(12, 2), nullable=True),
        sa.Column('credit_score', sa.Integer(), nullable=True),
        sa.Column('amount_down', sa.Numeric(12, 2), nullable=True),
        sa.Column('mortgage_type', sa.String(length=50), nullable=True),
        sa.Column('monthly_debt', sa.Numeric(12, 2), nullable=True),
        sa.Column('homestead_exemption', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_financial_profiles_user_id', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id')
    )
    op.create_index(op.f('ix_financial_profiles_id'), 'financial_profiles', ['id'], unique=False)

    money = lambda name, nullable=False: sa.Column(name, sa.Numeric(12, 2), nullable=nullable)
    op.create_table(
        'saved_calculations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        money('asking_price'),
        sa.Column('property_photo_url', sa.Text(), nullable=True),
        # Payment breakdown
        money('principal'),
        money('interest'),
        money('property_taxes'),
        money('hoa'),
        money('pmi'),
        money('homeowners_insurance'),
        money('flood_insurance'),
        money('other'),
        money('total_monthly_payment'),
        # Financial profile snapshot
        sa.Column('snapshot_age', sa.Integer(), nullable=True),
        money('snapshot_annual_income', nullable=True),
        sa.Column('snapshot_credit_score', sa.Integer(), nullable=True),
        money('snapshot_amount_down', nullable=True),
        sa.Column('snapshot_mortgage_type', sa.String(length=50), nullable=True),
        money('snapshot_monthly_debt', nullable=True),
        sa.Column('snapshot_homestead_exemption', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_saved_calculations_user_id', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_saved_calculations_id'), 'saved_calculations', ['id'], unique=False)
    op.create_index(op.f('ix_saved_calculations_user_id'), 'saved_calculations', ['user_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema - Drop all tables."""
    op.drop_index(op.f('ix_saved_calculations_user_id'), table_name='saved_calculations')
    op.drop_index(op.f('ix_saved_calculations_id'), table_name='saved_calculations')
    op.drop_table('saved_calculations')
    op.drop_index(op.f('ix_financial_profiles_id'), table_name='financial_profiles')
    op.drop_table('financial_profiles')
    op.drop_index(op.f('ix_users_username'), table_name='users')
    op.drop_index(op.f('ix_users_id'), table_name='users')
    op.drop_table('users')
