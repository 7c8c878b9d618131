"""initial schema: companies, security, employees, attendance

Revision ID: 3f1a9c2e7b10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2e7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'companies',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(length=50), nullable=False, unique=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'departments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('company_id', 'name', name='uq_department_company_name'),
    )
    op.create_index('ix_departments_company_id', 'departments', ['company_id'])

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_company_id', 'users', ['company_id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'roles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False),
        sa.Column('code', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=True),
        sa.UniqueConstraint('company_id', 'code', name='uq_role_company_code'),
    )
    op.create_index('ix_roles_company_id', 'roles', ['company_id'])

    op.create_table(
        'user_roles',
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('role_id', sa.Integer(), sa.ForeignKey('roles.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('department_id', sa.Integer(), sa.ForeignKey('departments.id', ondelete='SET NULL'), nullable=True),
        sa.Column('first_name', sa.String(length=80), nullable=False),
        sa.Column('last_name', sa.String(length=80), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('id_number', sa.String(length=32), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('date_joined', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('company_id', 'email', name='uq_employee_company_email'),
        sa.UniqueConstraint('company_id', 'id_number', name='uq_employee_company_id_number'),
    )
    op.create_index('ix_emp_company_status', 'employees', ['company_id', 'status'])
    op.create_index('ix_emp_dept_id', 'employees', ['department_id'])

    op.create_table(
        'holidays',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('is_recurring', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('company_id', 'date', 'name', name='uq_holiday_company_date_name'),
    )
    op.create_index('ix_holidays_company_id', 'holidays', ['company_id'])
    op.create_index('ix_holiday_company_date', 'holidays', ['company_id', 'date'])

    op.create_table(
        'work_shifts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('name', sa.String(length=60), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('grace_minutes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_night_shift', sa.Boolean(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('company_id', 'name', name='uq_work_shift_company_name'),
    )
    op.create_index('ix_work_shifts_company_id', 'work_shifts', ['company_id'])

    op.create_table(
        'schedules',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('day_of_week', sa.SmallInteger(), nullable=False),
        sa.Column('is_work_day', sa.Boolean(), nullable=False),
        sa.Column('work_shift_id', sa.Integer(), sa.ForeignKey('work_shifts.id', ondelete='RESTRICT'), nullable=True),
        sa.UniqueConstraint('employee_id', 'day_of_week', name='uq_schedule_employee_day'),
        sa.CheckConstraint('day_of_week >= 0 AND day_of_week <= 6', name='ck_schedule_day_of_week'),
    )
    op.create_index('ix_schedules_company_id', 'schedules', ['company_id'])
    op.create_index('ix_schedules_employee_id', 'schedules', ['employee_id'])
    op.create_index('ix_schedules_work_shift_id', 'schedules', ['work_shift_id'])

    op.create_table(
        'time_entries',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('clock_in', sa.DateTime(), nullable=True),
        sa.Column('clock_out', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_time_entry_company_date', 'time_entries', ['company_id', 'date'])
    op.create_index('ix_time_entry_employee_date', 'time_entries', ['employee_id', 'date'])


def downgrade() -> None:
    op.drop_index('ix_time_entry_employee_date', table_name='time_entries')
    op.drop_index('ix_time_entry_company_date', table_name='time_entries')
    op.drop_table('time_entries')
    op.drop_index('ix_schedules_work_shift_id', table_name='schedules')
    op.drop_index('ix_schedules_employee_id', table_name='schedules')
    op.drop_index('ix_schedules_company_id', table_name='schedules')
    op.drop_table('schedules')
    op.drop_index('ix_work_shifts_company_id', table_name='work_shifts')
    op.drop_table('work_shifts')
    op.drop_index('ix_holiday_company_date', table_name='holidays')
    op.drop_index('ix_holidays_company_id', table_name='holidays')
    op.drop_table('holidays')
    op.drop_index('ix_emp_dept_id', table_name='employees')
    op.drop_index('ix_emp_company_status', table_name='employees')
    op.drop_table('employees')
    op.drop_table('user_roles')
    op.drop_index('ix_roles_company_id', table_name='roles')
    op.drop_table('roles')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_company_id', table_name='users')
    op.drop_table('users')
    op.drop_index('ix_departments_company_id', table_name='departments')
    op.drop_table('departments')
    op.drop_table('companies')
