"""Initial schema: users, catalog, ledgers, assignments and notifications

Revision ID: 0001_initial
Revises:
Create Date: 2025-01-15 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _enum():
    # Enums are stored by value in plain VARCHAR columns (see `enum_column`).
    return sa.String(length=32)


def _tz():
    return sa.DateTime(timezone=True)


def upgrade() -> None:
    """Create every table together with the ledger uniqueness constraints."""
    op.create_table(
        'users',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('first_name', sa.String(), nullable=False),
        sa.Column('last_name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('role', _enum(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('avatar', sa.String(), nullable=True),
        sa.Column('last_login', _tz(), nullable=True),
        sa.Column('created_at', _tz(), server_default=sa.func.now()),
        sa.Column('parent_id', sa.String(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('state', _enum(), nullable=False),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])
    op.create_index('ix_users_parent_id', 'users', ['parent_id'])
    op.create_index('ix_users_state', 'users', ['state'])

    op.create_table(
        'courses',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('short_description', sa.String(), nullable=True),
        sa.Column('code', sa.String(), nullable=False),
        sa.Column('credits', sa.Integer(), nullable=False),
        sa.Column('level', _enum(), nullable=False),
        sa.Column('objectives', sa.JSON(), nullable=False),
        sa.Column('duration_weeks', sa.Integer(), nullable=False),
        sa.Column('is_free', sa.Boolean(), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('currency', sa.String(), nullable=False),
        sa.Column('max_students', sa.Integer(), nullable=False),
        sa.Column('thumbnail', sa.String(), nullable=True),
        sa.Column('status', _enum(), nullable=False),
        sa.Column('total_enrollments', sa.Integer(), nullable=False),
        sa.Column('created_at', _tz(), server_default=sa.func.now()),
        sa.Column('creator_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('state', _enum(), nullable=False),
    )
    op.create_index('ix_courses_id', 'courses', ['id'])
    op.create_index('ix_courses_title', 'courses', ['title'])
    op.create_index('ix_courses_code', 'courses', ['code'], unique=True)
    op.create_index('ix_courses_status', 'courses', ['status'])
    op.create_index('ix_courses_creator_id', 'courses', ['creator_id'])
    op.create_index('ix_courses_state', 'courses', ['state'])

    op.create_table(
        'course_instructors',
        sa.Column('course_id', sa.String(), sa.ForeignKey('courses.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'classes',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('course_id', sa.String(), sa.ForeignKey('courses.id'), nullable=False),
        sa.Column('instructor_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('start_time', _tz(), nullable=False),
        sa.Column('end_time', _tz(), nullable=False),
        sa.Column('is_recurring', sa.Boolean(), nullable=False),
        sa.Column('recurrence_pattern', sa.String(), nullable=True),
        sa.Column('recurrence_end_date', _tz(), nullable=True),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('is_online', sa.Boolean(), nullable=False),
        sa.Column('meeting_link', sa.String(), nullable=True),
        sa.Column('max_capacity', sa.Integer(), nullable=False),
        sa.Column('agenda', sa.Text(), nullable=True),
        sa.Column('status', _enum(), nullable=False),
        sa.Column('created_at', _tz(), server_default=sa.func.now()),
        sa.Column('state', _enum(), nullable=False),
    )
    op.create_index('ix_classes_id', 'classes', ['id'])
    op.create_index('ix_classes_course_id', 'classes', ['course_id'])
    op.create_index('ix_classes_instructor_id', 'classes', ['instructor_id'])
    op.create_index('ix_classes_start_time', 'classes', ['start_time'])
    op.create_index('ix_classes_status', 'classes', ['status'])
    op.create_index('ix_classes_state', 'classes', ['state'])

    op.create_table(
        'enrollments',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('student_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('course_id', sa.String(), sa.ForeignKey('courses.id'), nullable=False),
        sa.Column('instructor_id', sa.String(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('progress', sa.Float(), nullable=False),
        sa.Column('grade', sa.Float(), nullable=True),
        sa.Column('status', _enum(), nullable=False),
        sa.Column('enrolled_at', _tz(), server_default=sa.func.now()),
        sa.UniqueConstraint('student_id', 'course_id', name='uq_enrollment_student_course'),
    )
    op.create_index('ix_enrollments_id', 'enrollments', ['id'])
    op.create_index('ix_enrollments_student_id', 'enrollments', ['student_id'])
    op.create_index('ix_enrollments_course_id', 'enrollments', ['course_id'])
    op.create_index('ix_enrollments_status', 'enrollments', ['status'])

    op.create_table(
        'attendance',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('class_id', sa.String(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('student_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('date', _tz(), nullable=False),
        sa.Column('day', sa.Date(), nullable=False),
        sa.Column('status', _enum(), nullable=False),
        sa.Column('time_in', _tz(), nullable=True),
        sa.Column('time_out', _tz(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('excuse_reason', sa.Text(), nullable=True),
        sa.Column('excuse_approved', sa.Boolean(), nullable=False),
        sa.Column('created_at', _tz(), server_default=sa.func.now()),
        sa.UniqueConstraint('student_id', 'class_id', 'day', name='uq_attendance_student_class_day'),
    )
    op.create_index('ix_attendance_id', 'attendance', ['id'])
    op.create_index('ix_attendance_class_id', 'attendance', ['class_id'])
    op.create_index('ix_attendance_student_id', 'attendance', ['student_id'])
    op.create_index('ix_attendance_day', 'attendance', ['day'])

    op.create_table(
        'assignments',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('instructions', sa.Text(), nullable=True),
        sa.Column('course_id', sa.String(), sa.ForeignKey('courses.id'), nullable=False),
        sa.Column('class_id', sa.String(), sa.ForeignKey('classes.id'), nullable=True),
        sa.Column('creator_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('type', _enum(), nullable=False),
        sa.Column('status', _enum(), nullable=False),
        sa.Column('total_points', sa.Integer(), nullable=False),
        sa.Column('passing_score', sa.Integer(), nullable=False),
        sa.Column('weight', sa.Float(), nullable=False),
        sa.Column('publish_date', _tz(), nullable=True),
        sa.Column('due_date', _tz(), nullable=False),
        sa.Column('allow_late_submissions', sa.Boolean(), nullable=False),
        sa.Column('late_submission_penalty', sa.Float(), nullable=False),
        sa.Column('allowed_file_types', sa.JSON(), nullable=False),
        sa.Column('max_file_size', sa.Integer(), nullable=False),
        sa.Column('max_files', sa.Integer(), nullable=False),
        sa.Column('resources', sa.JSON(), nullable=False),
        sa.Column('rubric', sa.JSON(), nullable=False),
        sa.Column('created_at', _tz(), server_default=sa.func.now()),
        sa.Column('state', _enum(), nullable=False),
    )
    op.create_index('ix_assignments_id', 'assignments', ['id'])
    op.create_index('ix_assignments_course_id', 'assignments', ['course_id'])
    op.create_index('ix_assignments_class_id', 'assignments', ['class_id'])
    op.create_index('ix_assignments_creator_id', 'assignments', ['creator_id'])
    op.create_index('ix_assignments_status', 'assignments', ['status'])
    op.create_index('ix_assignments_due_date', 'assignments', ['due_date'])
    op.create_index('ix_assignments_state', 'assignments', ['state'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', _enum(), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('created_at', _tz(), server_default=sa.func.now()),
    )
    op.create_index('ix_notifications_id', 'notifications', ['id'])
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])
    op.create_index('ix_notifications_is_read', 'notifications', ['is_read'])
    op.create_index('ix_notifications_created_at', 'notifications', ['created_at'])


def downgrade() -> None:
    """Drop every table in reverse dependency order."""
    op.drop_table('notifications')
    op.drop_table('assignments')
    op.drop_table('attendance')
    op.drop_table('enrollments')
    op.drop_table('classes')
    op.drop_table('course_instructors')
    op.drop_table('courses')
    op.drop_table('users')
