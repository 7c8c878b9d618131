"""special day assignments

Revision ID: 8c4d2b7e1a55
Revises: 3f1a9c2e7b10
Create Date: 2026-10-19 15:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8c4d2b7e1a55'
down_revision: Union[str, Sequence[str], None] = '3f1a9c2e7b10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'special_day_assignments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('is_mandatory', sa.Boolean(), nullable=False),
        sa.Column('notes', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('employee_id', 'date', name='uq_special_day_employee_date'),
    )
    op.create_index('ix_special_day_assignments_company_id', 'special_day_assignments', ['company_id'])
    op.create_index('ix_special_day_assignments_employee_id', 'special_day_assignments', ['employee_id'])
    op.create_index('ix_special_day_company_date', 'special_day_assignments', ['company_id', 'date'])


def downgrade() -> None:
    op.drop_index('ix_special_day_company_date', table_name='special_day_assignments')
    op.drop_index('ix_special_day_assignments_employee_id', table_name='special_day_assignments')
    op.drop_index('ix_special_day_assignments_company_id', table_name='special_day_assignments')
    op.drop_table('special_day_assignments')
