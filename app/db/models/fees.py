# app/db/models/fees.py
from sqlalchemy import Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base import Base


class FeeCategory(Base):
    __tablename__ = "fee_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)  # Tuition, Exam, Transport
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)


class FeeStructure(Base):
    __tablename__ = "fee_structures"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    academic_session_id = Column(Integer, ForeignKey("academic_sessions.id"), nullable=False)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=True)  # NULL applies to every class
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    items = relationship("FeeStructureItem", back_populates="fee_structure", cascade="all, delete-orphan")


class FeeStructureItem(Base):
    __tablename__ = "fee_structure_items"

    id = Column(Integer, primary_key=True, index=True)
    fee_structure_id = Column(Integer, ForeignKey("fee_structures.id"), nullable=False)
    fee_category_id = Column(Integer, ForeignKey("fee_categories.id"), nullable=False)
    amount = Column(Float, nullable=False)
    due_date = Column(Date, nullable=True)
    is_optional = Column(Boolean, default=False, nullable=False)

    fee_structure = relationship("FeeStructure", back_populates="items")
    category = relationship("FeeCategory")


class StudentFee(Base):
    __tablename__ = "student_fees"
    __table_args__ = (
        UniqueConstraint(
            "student_id", "fee_structure_id", "academic_session_id", name="uq_student_fee_structure_session"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    fee_structure_id = Column(Integer, ForeignKey("fee_structures.id"), nullable=False)
    academic_session_id = Column(Integer, ForeignKey("academic_sessions.id"), nullable=False)
    total_amount = Column(Float, nullable=False)
    paid_amount = Column(Float, default=0, nullable=False)
    discount_amount = Column(Float, default=0, nullable=False)
    waiver_amount = Column(Float, default=0, nullable=False)
    due_amount = Column(Float, nullable=False)
    status = Column(String(20), default="pending", nullable=False)  # pending → partial → paid
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    student = relationship("Student")
    fee_structure = relationship("FeeStructure")


class FeePayment(Base):
    __tablename__ = "fee_payments"

    id = Column(Integer, primary_key=True, index=True)
    student_fee_id = Column(Integer, ForeignKey("student_fees.id"), nullable=False)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    payment_date = Column(Date, nullable=False)
    payment_method = Column(String(30), nullable=False)  # cash, bank, mobile
    transaction_id = Column(String(100), nullable=True)
    receipt_number = Column(String(40), unique=True, nullable=False)
    remarks = Column(Text, nullable=True)
    collected_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    student_fee = relationship("StudentFee")
    student = relationship("Student")
