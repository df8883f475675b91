"""Initial leave tracking schema

Revision ID: 001_initial_leave_schema
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001_initial_leave_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Enum types are created once up front; columns reference them without re-creating
role_enum = postgresql.ENUM(
    'EMPLOYEE', 'MANAGER', 'HR', 'ADMIN', 'TOP_MANAGEMENT',
    name='role', create_type=False,
)
department_enum = postgresql.ENUM(
    'HUMAN_RESOURCES', 'IT_DIGITAL_TRANSFORMATION', 'ACCOUNTING', 'CREDIT_COLLECTION',
    'SALES', 'BUSINESS_UNIT', 'BUSINESS_SUPPORT_GROUP', 'OPERATIONS_LOGISTICS',
    'OPERATIONS_FRONTLINE', 'OPERATIONS_WAREHOUSE', 'TOP_MANAGEMENT',
    name='department', create_type=False,
)
leave_type_enum = postgresql.ENUM(
    'VACATION', 'SICK', 'EMERGENCY', 'BEREAVEMENT', 'MATERNITY', 'PATERNITY', 'INDEFINITE',
    name='leavetype', create_type=False,
)
leave_status_enum = postgresql.ENUM(
    'PENDING', 'APPROVED', 'REJECTED', 'CANCELLED',
    name='leavestatus', create_type=False,
)

ALL_ENUMS = (role_enum, department_enum, leave_type_enum, leave_status_enum)


def upgrade() -> None:
    bind = op.get_bind()
    for enum_type in ALL_ENUMS:
        enum_type.create(bind, checkfirst=True)

    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('emp_code', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('position', sa.String(), nullable=False, server_default=''),
        sa.Column('department', department_enum, nullable=False),
        sa.Column('role', role_enum, nullable=False, server_default='EMPLOYEE'),
        sa.Column('password_hash', sa.String(), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('CURRENT_TIMESTAMP'),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_employees_id'), 'employees', ['id'], unique=False)
    op.create_index(op.f('ix_employees_emp_code'), 'employees', ['emp_code'], unique=True)
    op.create_index(op.f('ix_employees_email'), 'employees', ['email'], unique=True)
    op.create_index(op.f('ix_employees_department'), 'employees', ['department'], unique=False)

    op.create_table(
        'pto_balances',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('employee_id', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('total_credits', sa.Integer(), nullable=False, server_default='5'),
        sa.Column('used_credits', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('lwop_days', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column(
            'updated_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('CURRENT_TIMESTAMP'),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(['employee_id'], ['employees.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('employee_id', 'year', name='uq_pto_balances_employee_year'),
        sa.CheckConstraint('used_credits >= 0', name='check_used_credits_non_negative'),
        sa.CheckConstraint('lwop_days >= 0', name='check_lwop_days_non_negative'),
        sa.CheckConstraint('used_credits <= total_credits', name='check_used_le_total'),
    )
    op.create_index(op.f('ix_pto_balances_id'), 'pto_balances', ['id'], unique=False)
    op.create_index(op.f('ix_pto_balances_employee_id'), 'pto_balances', ['employee_id'], unique=False)
    op.create_index(op.f('ix_pto_balances_year'), 'pto_balances', ['year'], unique=False)

    op.create_table(
        'leave_requests',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('employee_id', sa.Integer(), nullable=False),
        sa.Column('leave_type', leave_type_enum, nullable=False),
        sa.Column('department', department_enum, nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('total_days', sa.Integer(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=False),
        sa.Column('status', leave_status_enum, nullable=False, server_default='PENDING'),
        sa.Column('is_lwop', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('approver_id', sa.Integer(), nullable=True),
        sa.Column('approver_remarks', sa.Text(), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('filed_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.ForeignKeyConstraint(['employee_id'], ['employees.id'], ),
        sa.ForeignKeyConstraint(['approver_id'], ['employees.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('start_date <= end_date', name='check_start_date_le_end_date'),
    )
    op.create_index(op.f('ix_leave_requests_id'), 'leave_requests', ['id'], unique=False)
    op.create_index(op.f('ix_leave_requests_employee_id'), 'leave_requests', ['employee_id'], unique=False)
    op.create_index(op.f('ix_leave_requests_department'), 'leave_requests', ['department'], unique=False)
    op.create_index(op.f('ix_leave_requests_status'), 'leave_requests', ['status'], unique=False)
    op.create_index(op.f('ix_leave_requests_approver_id'), 'leave_requests', ['approver_id'], unique=False)
    op.create_index(
        'ix_leave_requests_employee_dates', 'leave_requests',
        ['employee_id', 'start_date', 'end_date'], unique=False,
    )

    op.create_table(
        'department_approvers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('department', department_enum, nullable=False),
        sa.Column('approver_id', sa.Integer(), nullable=False),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('CURRENT_TIMESTAMP'),
            nullable=False,
        ),
        sa.Column(
            'updated_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('CURRENT_TIMESTAMP'),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(['approver_id'], ['employees.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('department', 'approver_id', name='uq_department_approver'),
    )
    op.create_index(op.f('ix_department_approvers_id'), 'department_approvers', ['id'], unique=False)
    op.create_index(
        op.f('ix_department_approvers_department'), 'department_approvers', ['department'], unique=False
    )
    op.create_index(
        op.f('ix_department_approvers_approver_id'), 'department_approvers', ['approver_id'], unique=False
    )

    op.create_table(
        'leave_audit_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('leave_request_id', sa.Integer(), nullable=False),
        sa.Column('actor_id', sa.Integer(), nullable=False),
        sa.Column('action', sa.String(), nullable=False),
        sa.Column('previous_status', leave_status_enum, nullable=True),
        sa.Column('new_status', leave_status_enum, nullable=True),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('pto_deducted', sa.Integer(), nullable=True),
        sa.Column('is_lwop', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['leave_request_id'], ['leave_requests.id'], ),
        sa.ForeignKeyConstraint(['actor_id'], ['employees.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_leave_audit_logs_id'), 'leave_audit_logs', ['id'], unique=False)
    op.create_index(
        op.f('ix_leave_audit_logs_leave_request_id'), 'leave_audit_logs', ['leave_request_id'], unique=False
    )
    op.create_index(op.f('ix_leave_audit_logs_actor_id'), 'leave_audit_logs', ['actor_id'], unique=False)


def downgrade() -> None:
    op.drop_table('leave_audit_logs')
    op.drop_table('department_approvers')
    op.drop_table('leave_requests')
    op.drop_table('pto_balances')
    op.drop_table('employees')

    bind = op.get_bind()
    for enum_type in reversed(ALL_ENUMS):
        enum_type.drop(bind, checkfirst=True)
