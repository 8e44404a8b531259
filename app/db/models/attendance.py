# app/db/models/attendance.py
from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base import Base

# present / absent / late / excused
STATUSES = ("present", "absent", "late", "excused")


class AttendanceMark(Base):
    __tablename__ = "attendance"
    __table_args__ = (
        UniqueConstraint("student_id", "class_id", "section_id", "date", name="uq_attendance_student_day"),
    )

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False)
    section_id = Column(Integer, ForeignKey("sections.id"), nullable=False)
    date = Column(Date, nullable=False, index=True)
    status = Column(String(20), nullable=False, default="present")
    remarks = Column(Text, nullable=True)
    marked_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    student = relationship("Student")


class ClassAttendanceSummary(Base):
    __tablename__ = "class_attendance"
    __table_args__ = (
        UniqueConstraint("class_id", "section_id", "date", name="uq_class_attendance_day"),
    )

    id = Column(Integer, primary_key=True, index=True)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False)
    section_id = Column(Integer, ForeignKey("sections.id"), nullable=False)
    date = Column(Date, nullable=False, index=True)

    total_students = Column(Integer, default=0, nullable=False)
    present_count = Column(Integer, default=0, nullable=False)
    absent_count = Column(Integer, default=0, nullable=False)
    late_count = Column(Integer, default=0, nullable=False)
    excused_count = Column(Integer, default=0, nullable=False)

    # One-way latch, see services.attendance.finalize_attendance
    is_finalized = Column(Boolean, default=False, nullable=False)
    marked_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
