"""performance schema

Revision ID: 3f2a9c1d7e45
Revises: 
Create Date: 2026-10-19 10:12:41.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7e45'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    ]


def _audit():
    return [
        sa.Column('created_by', sa.String(), nullable=True),
        sa.Column('updated_by', sa.String(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'employees',
        sa.Column('employee_id', sa.String(), primary_key=True),
        sa.Column('first_name', sa.String(), nullable=False),
        sa.Column('last_name', sa.String(), nullable=False),
        sa.Column('middle_name', sa.String(), nullable=True),
        sa.Column('department', sa.String(), nullable=True),
        sa.Column('position', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False, unique=True),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('role', sa.String(), nullable=False, server_default='staff'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('employee_id', sa.String(), sa.ForeignKey('employees.employee_id'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )

    op.create_table(
        'kpis',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.String(), nullable=False, index=True),
        sa.Column('weight', sa.Float(), nullable=False),
        sa.Column('max_score', sa.Float(), nullable=False),
        sa.Column('min_score', sa.Float(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_audit(),
        *_timestamps(),
    )

    op.create_table(
        'performance_metrics',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.String(), sa.ForeignKey('employees.employee_id'), nullable=False, index=True),
        sa.Column('metric_name', sa.String(), nullable=False),
        sa.Column('metric_type', sa.String(), nullable=False),
        sa.Column('value', sa.Float(), nullable=False),
        sa.Column('target', sa.Float(), nullable=True),
        sa.Column('unit', sa.String(), nullable=True),
        sa.Column('period', sa.String(), nullable=False),
        sa.Column('period_start', sa.Date(), nullable=False),
        sa.Column('period_end', sa.Date(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_audit(),
        *_timestamps(),
    )

    op.create_table(
        'performance_reviews',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.String(), sa.ForeignKey('employees.employee_id'), nullable=False, index=True),
        sa.Column('reviewer_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('period', sa.String(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('kpi_score', sa.Float(), nullable=True),
        sa.Column('behavior_score', sa.Float(), nullable=True),
        sa.Column('attendance_score', sa.Float(), nullable=True),
        sa.Column('total_score', sa.Float(), nullable=True),
        sa.Column('status', sa.String(), nullable=False, server_default='draft'),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('employee_comments', sa.Text(), nullable=True),
        sa.Column('goals', sa.JSON(), nullable=True),
        sa.Column('achievements', sa.JSON(), nullable=True),
        sa.Column('improvement_areas', sa.JSON(), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        *_audit(),
        *_timestamps(),
    )

    op.create_table(
        'performance_goals',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.String(), sa.ForeignKey('employees.employee_id'), nullable=False, index=True),
        sa.Column('performance_review_id', sa.Integer(),
                  sa.ForeignKey('performance_reviews.id', ondelete='SET NULL'), nullable=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('target_date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(), nullable=False, server_default='NotStarted'),
        sa.Column('progress', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('completion_date', sa.Date(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_audit(),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table('performance_goals')
    op.drop_table('performance_reviews')
    op.drop_table('performance_metrics')
    op.drop_table('kpis')
    op.drop_table('users')
    op.drop_table('employees')
