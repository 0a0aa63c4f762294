"""create scheduling tables

Revision ID: create_scheduling_tables
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID


# revision identifiers, used by Alembic.
revision: str = 'create_scheduling_tables'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

employee_role = sa.Enum('dispatcher', 'supervisor', 'manager', name='employee_role')
shift_pattern = sa.Enum('four_by_ten', 'three_by_twelve_plus_four', name='shift_pattern')
shift_category = sa.Enum('early', 'day', 'swing', 'graveyard', name='shift_category')
shift_status = sa.Enum('scheduled', 'in_progress', 'completed', 'missed', 'cancelled', name='shift_status')
time_off_type = sa.Enum('vacation', 'sick', 'personal', 'other', name='time_off_type')
time_off_status = sa.Enum('pending', 'approved', 'rejected', name='time_off_status')


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'employees',
        sa.Column('employee_id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('role', employee_role, nullable=False),
        sa.Column('shift_pattern', shift_pattern, nullable=False),
        sa.Column('preferred_shift_category', shift_category, nullable=True),
        sa.Column('weekly_hours_cap', sa.Float(), nullable=False),
        sa.Column('max_overtime_hours', sa.Float(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('employee_id'),
    )

    op.create_table(
        'shift_options',
        sa.Column('shift_option_id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('category', shift_category, nullable=False),
        sa.Column('requires_supervisor', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('shift_option_id'),
    )

    op.create_table(
        'staffing_requirements',
        sa.Column('staffing_requirement_id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.Text(), nullable=False, server_default=''),
        sa.Column('time_block_start', sa.Time(), nullable=False),
        sa.Column('time_block_end', sa.Time(), nullable=False),
        sa.Column('min_total_staff', sa.Integer(), nullable=False),
        sa.Column('min_supervisors', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('day_of_week', sa.Integer(), nullable=True),
        sa.Column('specific_date', sa.Date(), nullable=True),
        sa.Column('is_holiday', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('min_total_staff >= 0', name='ck_staffing_min_total_nonneg'),
        sa.CheckConstraint('min_supervisors >= 0', name='ck_staffing_min_supervisors_nonneg'),
        sa.PrimaryKeyConstraint('staffing_requirement_id'),
    )

    op.create_table(
        'holidays',
        sa.Column('holiday_id', UUID(as_uuid=True), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False, server_default=''),
        sa.PrimaryKeyConstraint('holiday_id'),
        sa.UniqueConstraint('date'),
    )

    op.create_table(
        'schedule_periods',
        sa.Column('schedule_period_id', UUID(as_uuid=True), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('is_published', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('schedule_period_id'),
    )

    op.create_table(
        'individual_shifts',
        sa.Column('individual_shift_id', UUID(as_uuid=True), nullable=False),
        sa.Column('schedule_period_id', UUID(as_uuid=True), nullable=True),
        sa.Column('employee_id', UUID(as_uuid=True), nullable=False),
        sa.Column('shift_option_id', UUID(as_uuid=True), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('status', shift_status, nullable=False, server_default='scheduled'),
        sa.Column('actual_start_time', sa.DateTime(), nullable=True),
        sa.Column('actual_end_time', sa.DateTime(), nullable=True),
        sa.Column('is_overtime', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('is_supervisor', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['schedule_period_id'], ['schedule_periods.schedule_period_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['employee_id'], ['employees.employee_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['shift_option_id'], ['shift_options.shift_option_id']),
        sa.PrimaryKeyConstraint('individual_shift_id'),
    )
    op.create_index(op.f('ix_individual_shifts_schedule_period_id'), 'individual_shifts', ['schedule_period_id'], unique=False)
    op.create_index(op.f('ix_individual_shifts_employee_id'), 'individual_shifts', ['employee_id'], unique=False)
    op.create_index(op.f('ix_individual_shifts_date'), 'individual_shifts', ['date'], unique=False)

    op.create_table(
        'time_off_requests',
        sa.Column('time_off_id', UUID(as_uuid=True), nullable=False),
        sa.Column('employee_id', UUID(as_uuid=True), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('type', time_off_type, nullable=False),
        sa.Column('status', time_off_status, nullable=False, server_default='pending'),
        sa.Column('note', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['employee_id'], ['employees.employee_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('time_off_id'),
    )
    op.create_index(op.f('ix_time_off_requests_employee_id'), 'time_off_requests', ['employee_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_time_off_requests_employee_id'), table_name='time_off_requests')
    op.drop_table('time_off_requests')
    op.drop_index(op.f('ix_individual_shifts_date'), table_name='individual_shifts')
    op.drop_index(op.f('ix_individual_shifts_employee_id'), table_name='individual_shifts')
    op.drop_index(op.f('ix_individual_shifts_schedule_period_id'), table_name='individual_shifts')
    op.drop_table('individual_shifts')
    op.drop_table('schedule_periods')
    op.drop_table('holidays')
    op.drop_table('staffing_requirements')
    op.drop_table('shift_options')
    op.drop_table('employees')

    bind = op.get_bind()
    for enum_type in (time_off_status, time_off_type, shift_status, shift_category, shift_pattern, employee_role):
        enum_type.drop(bind, checkfirst=True)
