# app/db/models/exam.py
from sqlalchemy import (
    Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base import Base


class ExamType(Base):
    __tablename__ = "exam_types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)  # Midterm, Final, Unit Test
    weightage = Column(Integer, default=100, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)


class Exam(Base):
    __tablename__ = "exams"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    exam_type_id = Column(Integer, ForeignKey("exam_types.id"), nullable=False)
    academic_session_id = Column(Integer, ForeignKey("academic_sessions.id"), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    description = Column(Text, nullable=True)
    results_published = Column(Boolean, default=False, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    exam_type = relationship("ExamType")
    subjects = relationship("ExamSubject", back_populates="exam")


class ExamSubject(Base):
    """One subject's paper within an exam for a class (and optionally a section)."""
    __tablename__ = "exam_subjects"

    id = Column(Integer, primary_key=True, index=True)
    exam_id = Column(Integer, ForeignKey("exams.id"), nullable=False, index=True)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False)
    section_id = Column(Integer, ForeignKey("sections.id"), nullable=True)
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False)

    exam_date = Column(Date, nullable=False)
    start_time = Column(String(10), nullable=False)  # HH:MM
    end_time = Column(String(10), nullable=False)
    total_marks = Column(Integer, nullable=False)
    passing_marks = Column(Integer, nullable=False)
    room_number = Column(String(50), nullable=True)

    exam = relationship("Exam", back_populates="subjects")
    subject = relationship("Subject")


class Mark(Base):
    __tablename__ = "marks"
    __table_args__ = (UniqueConstraint("exam_subject_id", "student_id", name="uq_mark_exam_subject_student"),)

    id = Column(Integer, primary_key=True, index=True)
    exam_subject_id = Column(Integer, ForeignKey("exam_subjects.id"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False)
    marks_obtained = Column(Float, nullable=True)  # NULL when absent
    is_absent = Column(Boolean, default=False, nullable=False)
    remarks = Column(Text, nullable=True)
    entered_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class GradeBand(Base):
    __tablename__ = "grading_system"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    min_percentage = Column(Float, nullable=False)
    max_percentage = Column(Float, nullable=False)
    grade = Column(String(10), nullable=False)  # A+, A, B+ ...
    grade_point = Column(Float, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)


class Result(Base):
    __tablename__ = "results"
    __table_args__ = (UniqueConstraint("exam_id", "student_id", name="uq_result_exam_student"),)

    id = Column(Integer, primary_key=True, index=True)
    exam_id = Column(Integer, ForeignKey("exams.id"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False)
    section_id = Column(Integer, ForeignKey("sections.id"), nullable=True)

    total_marks = Column(Integer, nullable=False)
    marks_obtained = Column(Float, nullable=False)
    percentage = Column(Float, nullable=False)
    grade = Column(String(10), nullable=False)
    grade_point = Column(Float, nullable=False)
    merit_position = Column(Integer, nullable=True)

    is_published = Column(Boolean, default=False, nullable=False)
    published_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    subject_results = relationship(
        "SubjectResult", back_populates="result", cascade="all, delete-orphan"
    )


class SubjectResult(Base):
    __tablename__ = "subject_results"

    id = Column(Integer, primary_key=True, index=True)
    result_id = Column(Integer, ForeignKey("results.id"), nullable=False, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False)
    total_marks = Column(Integer, nullable=False)
    marks_obtained = Column(Float, nullable=False)
    grade = Column(String(10), nullable=False)
    grade_point = Column(Float, nullable=False)
    is_passed = Column(Boolean, nullable=False)

    result = relationship("Result", back_populates="subject_results")
    subject = relationship("Subject")
