"""initial school schema

Revision ID: 20261017_0001
Revises: 
Create Date: 2026-10-17 00:01:00
"""

from alembic import op
import sqlalchemy as sa


revision = '20261017_0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=80), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('name', sa.String(length=160), nullable=False),
        sa.Column('contact', sa.String(length=40), nullable=True),
        sa.Column('profile_picture', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table(
        'classes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('subjects', sa.JSON(), nullable=False),
    )
    op.create_index('ix_classes_id', 'classes', ['id'])
    op.create_index('ix_classes_name', 'classes', ['name'])

    op.create_table(
        'sections',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=60), nullable=False),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('room_number', sa.String(length=40), nullable=True),
        sa.Column('class_teacher_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
    )
    op.create_index('ix_sections_id', 'sections', ['id'])
    op.create_index('ix_sections_class_id', 'sections', ['class_id'])
    op.create_index('ix_sections_class_teacher_id', 'sections', ['class_teacher_id'])

    op.create_table(
        'students',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('admission_number', sa.String(length=60), nullable=False),
        sa.Column('roll_number', sa.String(length=30), nullable=False),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('section_id', sa.Integer(), sa.ForeignKey('sections.id'), nullable=False),
        sa.Column('guardian_name', sa.String(length=160), nullable=False),
        sa.Column('guardian_contact', sa.String(length=40), nullable=False),
        sa.Column('guardian_email', sa.String(length=255), nullable=True),
    )
    op.create_index('ix_students_id', 'students', ['id'])
    op.create_index('ix_students_user_id', 'students', ['user_id'], unique=True)
    op.create_index('ix_students_admission_number', 'students', ['admission_number'], unique=True)
    op.create_index('ix_students_class_id', 'students', ['class_id'])
    op.create_index('ix_students_section_id', 'students', ['section_id'])

    op.create_table(
        'attendance_records',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id'), nullable=False),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('section_id', sa.Integer(), sa.ForeignKey('sections.id'), nullable=False),
        sa.Column('status', sa.String(length=10), nullable=False),
        sa.UniqueConstraint('student_id', 'date', name='uq_attendance_student_date'),
    )
    op.create_index('ix_attendance_records_id', 'attendance_records', ['id'])
    op.create_index('ix_attendance_records_date', 'attendance_records', ['date'])
    op.create_index('ix_attendance_records_student_id', 'attendance_records', ['student_id'])
    op.create_index('ix_attendance_records_status', 'attendance_records', ['status'])
    op.create_index('ix_attendance_date_class_section', 'attendance_records', ['date', 'class_id', 'section_id'])

    op.create_table(
        'assignments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('section_id', sa.Integer(), sa.ForeignKey('sections.id'), nullable=True),
        sa.Column('subject', sa.String(length=120), nullable=False),
        sa.Column('deadline', sa.Date(), nullable=False),
        sa.Column('teacher_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
    )
    op.create_index('ix_assignments_id', 'assignments', ['id'])
    op.create_index('ix_assignments_class_id', 'assignments', ['class_id'])
    op.create_index('ix_assignments_section_id', 'assignments', ['section_id'])
    op.create_index('ix_assignments_teacher_id', 'assignments', ['teacher_id'])

    op.create_table(
        'submissions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('assignment_id', sa.Integer(), sa.ForeignKey('assignments.id'), nullable=False),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id'), nullable=False),
        sa.Column('link', sa.String(length=1000), nullable=False),
        sa.Column('submitted_at', sa.DateTime(), nullable=False),
        sa.Column('grade', sa.String(length=20), nullable=True),
        sa.Column('feedback', sa.Text(), nullable=True),
        sa.Column('graded_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_submissions_id', 'submissions', ['id'])
    op.create_index('ix_submissions_assignment_id', 'submissions', ['assignment_id'])
    op.create_index('ix_submissions_student_id', 'submissions', ['student_id'])

    op.create_table(
        'fees',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id'), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('period', sa.String(length=60), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(length=10), nullable=False, server_default='Pending'),
        sa.Column('paid_date', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_fees_id', 'fees', ['id'])
    op.create_index('ix_fees_student_id', 'fees', ['student_id'])
    op.create_index('ix_fees_status', 'fees', ['status'])
    op.create_index('ix_fees_status_paid_date', 'fees', ['status', 'paid_date'])

    op.create_table(
        'teacher_profiles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('employee_id', sa.String(length=60), nullable=False),
        sa.Column('salary', sa.Float(), nullable=False),
        sa.Column('pan_number', sa.String(length=20), nullable=False),
        sa.Column('aadhaar_number', sa.String(length=20), nullable=False),
        sa.Column('qualification', sa.String(length=200), nullable=False),
        sa.Column('subject_specialization', sa.JSON(), nullable=False),
        sa.Column('join_date', sa.Date(), nullable=False),
        sa.Column('designation', sa.String(length=120), nullable=False),
    )
    op.create_index('ix_teacher_profiles_id', 'teacher_profiles', ['id'])
    op.create_index('ix_teacher_profiles_user_id', 'teacher_profiles', ['user_id'], unique=True)
    op.create_index('ix_teacher_profiles_employee_id', 'teacher_profiles', ['employee_id'], unique=True)

    op.create_table(
        'salary_payments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('teacher_profile_id', sa.Integer(), sa.ForeignKey('teacher_profiles.id'), nullable=False),
        sa.Column('month', sa.String(length=40), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('paid_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_salary_payments_id', 'salary_payments', ['id'])
    op.create_index('ix_salary_payments_teacher_profile_id', 'salary_payments', ['teacher_profile_id'])

    op.create_table(
        'timetable_entries',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('section_id', sa.Integer(), sa.ForeignKey('sections.id'), nullable=False),
        sa.Column('teacher_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('subject', sa.String(length=120), nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('period_number', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.String(length=5), nullable=False),
        sa.Column('end_time', sa.String(length=5), nullable=False),
        sa.UniqueConstraint('teacher_id', 'day_of_week', 'period_number', name='uq_timetable_teacher_slot'),
        sa.UniqueConstraint(
            'class_id', 'section_id', 'day_of_week', 'period_number', name='uq_timetable_section_slot'
        ),
    )
    op.create_index('ix_timetable_entries_id', 'timetable_entries', ['id'])
    op.create_index('ix_timetable_entries_class_id', 'timetable_entries', ['class_id'])
    op.create_index('ix_timetable_entries_section_id', 'timetable_entries', ['section_id'])
    op.create_index('ix_timetable_entries_teacher_id', 'timetable_entries', ['teacher_id'])


def downgrade() -> None:
    op.drop_table('timetable_entries')
    op.drop_table('salary_payments')
    op.drop_table('teacher_profiles')
    op.drop_table('fees')
    op.drop_table('submissions')
    op.drop_table('assignments')
    op.drop_table('attendance_records')
    op.drop_table('students')
    op.drop_table('sections')
    op.drop_table('classes')
    op.drop_table('users')
