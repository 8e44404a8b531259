"""fees, hostel, expenses, announcements and notifications

Revision ID: 9d2f61b8c5e4
Revises: 4a1c7e92d0b3
Create Date: 2026-10-17 14:03:27.518904

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '9d2f61b8c5e4'
down_revision: Union[str, None] = '4a1c7e92d0b3'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'fee_categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False, unique=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_fee_categories_id', 'fee_categories', ['id'])

    op.create_table(
        'fee_structures',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('academic_session_id', sa.Integer(), sa.ForeignKey('academic_sessions.id'), nullable=False),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id'), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_fee_structures_id', 'fee_structures', ['id'])

    op.create_table(
        'fee_structure_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('fee_structure_id', sa.Integer(), sa.ForeignKey('fee_structures.id'), nullable=False),
        sa.Column('fee_category_id', sa.Integer(), sa.ForeignKey('fee_categories.id'), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('is_optional', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_fee_structure_items_id', 'fee_structure_items', ['id'])

    op.create_table(
        'student_fees',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id'), nullable=False),
        sa.Column('fee_structure_id', sa.Integer(), sa.ForeignKey('fee_structures.id'), nullable=False),
        sa.Column('academic_session_id', sa.Integer(), sa.ForeignKey('academic_sessions.id'), nullable=False),
        sa.Column('total_amount', sa.Float(), nullable=False),
        sa.Column('paid_amount', sa.Float(), nullable=False),
        sa.Column('discount_amount', sa.Float(), nullable=False),
        sa.Column('waiver_amount', sa.Float(), nullable=False),
        sa.Column('due_amount', sa.Float(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint(
            'student_id', 'fee_structure_id', 'academic_session_id', name='uq_student_fee_structure_session'
        ),
    )
    op.create_index('ix_student_fees_id', 'student_fees', ['id'])
    op.create_index('ix_student_fees_student_id', 'student_fees', ['student_id'])

    op.create_table(
        'fee_payments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('student_fee_id', sa.Integer(), sa.ForeignKey('student_fees.id'), nullable=False),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id'), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('payment_method', sa.String(length=30), nullable=False),
        sa.Column('transaction_id', sa.String(length=100), nullable=True),
        sa.Column('receipt_number', sa.String(length=40), nullable=False, unique=True),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('collected_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_fee_payments_id', 'fee_payments', ['id'])
    op.create_index('ix_fee_payments_student_id', 'fee_payments', ['student_id'])

    op.create_table(
        'hostels',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False, unique=True),
        sa.Column('hostel_type', sa.String(length=20), nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('warden_name', sa.String(length=200), nullable=True),
        sa.Column('warden_phone', sa.String(length=20), nullable=True),
        sa.Column('total_capacity', sa.Integer(), nullable=False),
        sa.Column('occupied_capacity', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_hostels_id', 'hostels', ['id'])

    op.create_table(
        'rooms',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('hostel_id', sa.Integer(), sa.ForeignKey('hostels.id'), nullable=False),
        sa.Column('room_number', sa.String(length=20), nullable=False),
        sa.Column('room_type', sa.String(length=20), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('occupied_capacity', sa.Integer(), nullable=False),
        sa.Column('monthly_rent', sa.Float(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.UniqueConstraint('hostel_id', 'room_number', name='uq_room_hostel_number'),
    )
    op.create_index('ix_rooms_id', 'rooms', ['id'])

    op.create_table(
        'room_allocations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('room_id', sa.Integer(), sa.ForeignKey('rooms.id'), nullable=False),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id'), nullable=False),
        sa.Column('allocation_date', sa.Date(), nullable=False),
        sa.Column('vacate_date', sa.Date(), nullable=True),
        sa.Column('bed_number', sa.String(length=10), nullable=True),
        sa.Column('monthly_rent', sa.Float(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('allocated_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
    )
    op.create_index('ix_room_allocations_id', 'room_allocations', ['id'])
    op.create_index(
        'uq_room_allocation_active_student',
        'room_allocations',
        ['student_id'],
        unique=True,
        sqlite_where=sa.text("status = 'active'"),
        postgresql_where=sa.text("status = 'active'"),
    )

    op.create_table(
        'expense_categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False, unique=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_expense_categories_id', 'expense_categories', ['id'])

    op.create_table(
        'expenses',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('expense_categories.id'), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('expense_date', sa.Date(), nullable=False),
        sa.Column('payment_method', sa.String(length=30), nullable=True),
        sa.Column('invoice_number', sa.String(length=100), nullable=True),
        sa.Column('vendor_name', sa.String(length=200), nullable=True),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('recorded_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_expenses_id', 'expenses', ['id'])
    op.create_index('ix_expenses_expense_date', 'expenses', ['expense_date'])

    op.create_table(
        'announcements',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('target_audience', sa.String(length=30), nullable=False),
        sa.Column('target_class_ids', sa.JSON(), nullable=True),
        sa.Column('priority', sa.String(length=20), nullable=False),
        sa.Column('is_pinned', sa.Boolean(), nullable=False),
        sa.Column('published_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
    )
    op.create_index('ix_announcements_id', 'announcements', ['id'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('notification_type', sa.String(length=30), nullable=False),
        sa.Column('related_entity_type', sa.String(length=50), nullable=True),
        sa.Column('related_entity_id', sa.Integer(), nullable=True),
        sa.Column('action_url', sa.String(length=255), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('read_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_notifications_id', 'notifications', ['id'])
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])


def downgrade() -> None:
    for table in (
        'notifications', 'announcements', 'expenses', 'expense_categories',
        'room_allocations', 'rooms', 'hostels',
        'fee_payments', 'student_fees', 'fee_structure_items', 'fee_structures', 'fee_categories',
    ):
        op.drop_table(table)
