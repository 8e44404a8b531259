"""initial schema

Revision ID: 4a1c7e92d0b3
Revises:
Create Date: 2026-10-17 09:12:44.201733

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4a1c7e92d0b3'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ROLES = ("superadmin", "admin", "teacher", "student", "guardian", "accountant", "librarian")


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('role', sa.Enum(*ROLES, name='user_role'), nullable=False),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'academic_sessions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False, unique=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('is_current', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_academic_sessions_id', 'academic_sessions', ['id'])

    op.create_table(
        'classes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=50), nullable=False, unique=True),
    )
    op.create_index('ix_classes_id', 'classes', ['id'])

    op.create_table(
        'sections',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('name', sa.String(length=10), nullable=False),
        sa.UniqueConstraint('class_id', 'name', name='uq_section_class_name'),
    )
    op.create_index('ix_sections_id', 'sections', ['id'])

    op.create_table(
        'subjects',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False, unique=True),
        sa.Column('code', sa.String(length=20), nullable=True),
    )
    op.create_index('ix_subjects_id', 'subjects', ['id'])

    op.create_table(
        'students',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('admission_number', sa.String(length=50), nullable=False),
        sa.Column('full_name', sa.String(length=200), nullable=False),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('section_id', sa.Integer(), sa.ForeignKey('sections.id'), nullable=True),
        sa.Column('roll_number', sa.String(length=20), nullable=True),
        sa.Column('guardian_name', sa.String(length=200), nullable=True),
        sa.Column('guardian_phone', sa.String(length=20), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_students_id', 'students', ['id'])
    op.create_index('ix_students_admission_number', 'students', ['admission_number'], unique=True)

    op.create_table(
        'exam_types',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False, unique=True),
        sa.Column('weightage', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_exam_types_id', 'exam_types', ['id'])

    op.create_table(
        'exams',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('exam_type_id', sa.Integer(), sa.ForeignKey('exam_types.id'), nullable=False),
        sa.Column('academic_session_id', sa.Integer(), sa.ForeignKey('academic_sessions.id'), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('results_published', sa.Boolean(), nullable=False),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_exams_id', 'exams', ['id'])

    op.create_table(
        'exam_subjects',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('exam_id', sa.Integer(), sa.ForeignKey('exams.id'), nullable=False),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('section_id', sa.Integer(), sa.ForeignKey('sections.id'), nullable=True),
        sa.Column('subject_id', sa.Integer(), sa.ForeignKey('subjects.id'), nullable=False),
        sa.Column('exam_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.String(length=10), nullable=False),
        sa.Column('end_time', sa.String(length=10), nullable=False),
        sa.Column('total_marks', sa.Integer(), nullable=False),
        sa.Column('passing_marks', sa.Integer(), nullable=False),
        sa.Column('room_number', sa.String(length=50), nullable=True),
    )
    op.create_index('ix_exam_subjects_id', 'exam_subjects', ['id'])
    op.create_index('ix_exam_subjects_exam_id', 'exam_subjects', ['exam_id'])

    op.create_table(
        'marks',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('exam_subject_id', sa.Integer(), sa.ForeignKey('exam_subjects.id'), nullable=False),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id'), nullable=False),
        sa.Column('marks_obtained', sa.Float(), nullable=True),
        sa.Column('is_absent', sa.Boolean(), nullable=False),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('entered_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('exam_subject_id', 'student_id', name='uq_mark_exam_subject_student'),
    )
    op.create_index('ix_marks_id', 'marks', ['id'])
    op.create_index('ix_marks_exam_subject_id', 'marks', ['exam_subject_id'])

    op.create_table(
        'grading_system',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('min_percentage', sa.Float(), nullable=False),
        sa.Column('max_percentage', sa.Float(), nullable=False),
        sa.Column('grade', sa.String(length=10), nullable=False),
        sa.Column('grade_point', sa.Float(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_grading_system_id', 'grading_system', ['id'])

    op.create_table(
        'results',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('exam_id', sa.Integer(), sa.ForeignKey('exams.id'), nullable=False),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id'), nullable=False),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('section_id', sa.Integer(), sa.ForeignKey('sections.id'), nullable=True),
        sa.Column('total_marks', sa.Integer(), nullable=False),
        sa.Column('marks_obtained', sa.Float(), nullable=False),
        sa.Column('percentage', sa.Float(), nullable=False),
        sa.Column('grade', sa.String(length=10), nullable=False),
        sa.Column('grade_point', sa.Float(), nullable=False),
        sa.Column('merit_position', sa.Integer(), nullable=True),
        sa.Column('is_published', sa.Boolean(), nullable=False),
        sa.Column('published_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('exam_id', 'student_id', name='uq_result_exam_student'),
    )
    op.create_index('ix_results_id', 'results', ['id'])
    op.create_index('ix_results_exam_id', 'results', ['exam_id'])

    op.create_table(
        'subject_results',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('result_id', sa.Integer(), sa.ForeignKey('results.id'), nullable=False),
        sa.Column('subject_id', sa.Integer(), sa.ForeignKey('subjects.id'), nullable=False),
        sa.Column('total_marks', sa.Integer(), nullable=False),
        sa.Column('marks_obtained', sa.Float(), nullable=False),
        sa.Column('grade', sa.String(length=10), nullable=False),
        sa.Column('grade_point', sa.Float(), nullable=False),
        sa.Column('is_passed', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_subject_results_id', 'subject_results', ['id'])
    op.create_index('ix_subject_results_result_id', 'subject_results', ['result_id'])

    op.create_table(
        'attendance',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id'), nullable=False),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('section_id', sa.Integer(), sa.ForeignKey('sections.id'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('marked_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('student_id', 'class_id', 'section_id', 'date', name='uq_attendance_student_day'),
    )
    op.create_index('ix_attendance_id', 'attendance', ['id'])
    op.create_index('ix_attendance_date', 'attendance', ['date'])

    op.create_table(
        'class_attendance',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('section_id', sa.Integer(), sa.ForeignKey('sections.id'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('total_students', sa.Integer(), nullable=False),
        sa.Column('present_count', sa.Integer(), nullable=False),
        sa.Column('absent_count', sa.Integer(), nullable=False),
        sa.Column('late_count', sa.Integer(), nullable=False),
        sa.Column('excused_count', sa.Integer(), nullable=False),
        sa.Column('is_finalized', sa.Boolean(), nullable=False),
        sa.Column('marked_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('class_id', 'section_id', 'date', name='uq_class_attendance_day'),
    )
    op.create_index('ix_class_attendance_id', 'class_attendance', ['id'])
    op.create_index('ix_class_attendance_date', 'class_attendance', ['date'])

    op.create_table(
        'periods',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('start_time', sa.String(length=10), nullable=False),
        sa.Column('end_time', sa.String(length=10), nullable=False),
        sa.Column('order_index', sa.Integer(), nullable=False),
        sa.Column('is_break', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_periods_id', 'periods', ['id'])

    op.create_table(
        'timetable_entries',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('section_id', sa.Integer(), sa.ForeignKey('sections.id'), nullable=False),
        sa.Column('subject_id', sa.Integer(), sa.ForeignKey('subjects.id'), nullable=True),
        sa.Column('teacher_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('period_id', sa.Integer(), sa.ForeignKey('periods.id'), nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('room_number', sa.String(length=50), nullable=True),
        sa.UniqueConstraint('class_id', 'section_id', 'period_id', 'day_of_week', name='uq_timetable_slot'),
        sa.UniqueConstraint('teacher_id', 'period_id', 'day_of_week', name='uq_timetable_teacher_slot'),
    )
    op.create_index('ix_timetable_entries_id', 'timetable_entries', ['id'])

    op.create_table(
        'sms_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('recipient_phone', sa.String(length=20), nullable=False),
        sa.Column('recipient_name', sa.String(length=200), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('message_type', sa.String(length=50), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('provider', sa.String(length=50), nullable=False),
        sa.Column('provider_id', sa.String(length=100), nullable=True),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('related_entity_type', sa.String(length=50), nullable=True),
        sa.Column('related_entity_id', sa.Integer(), nullable=True),
        sa.Column('sent_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_sms_logs_id', 'sms_logs', ['id'])

    op.create_table(
        'books',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('author', sa.String(length=255), nullable=False),
        sa.Column('isbn', sa.String(length=20), nullable=True),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('total_quantity', sa.Integer(), nullable=False),
        sa.Column('available_quantity', sa.Integer(), nullable=False),
        sa.Column('shelf_location', sa.String(length=50), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_books_id', 'books', ['id'])

    op.create_table(
        'book_issues',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('book_id', sa.Integer(), sa.ForeignKey('books.id'), nullable=False),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id'), nullable=False),
        sa.Column('issue_date', sa.Date(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('return_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('fine_amount', sa.Integer(), nullable=False),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('issued_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
    )
    op.create_index('ix_book_issues_id', 'book_issues', ['id'])


def downgrade() -> None:
    for table in (
        'book_issues', 'books', 'sms_logs', 'timetable_entries', 'periods',
        'class_attendance', 'attendance', 'subject_results', 'results', 'grading_system',
        'marks', 'exam_subjects', 'exams', 'exam_types', 'students', 'subjects',
        'sections', 'classes', 'academic_sessions', 'users',
    ):
        op.drop_table(table)
    sa.Enum(name='user_role').drop(op.get_bind(), checkfirst=True)
