# app/db/models/timetable.py
from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base import Base


class Period(Base):
    __tablename__ = "periods"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)  # Period 1, Break ...
    start_time = Column(String(10), nullable=False)  # HH:MM
    end_time = Column(String(10), nullable=False)
    order_index = Column(Integer, nullable=False)
    is_break = Column(Boolean, default=False, nullable=False)


class TimetableEntry(Base):
    __tablename__ = "timetable_entries"
    __table_args__ = (
        UniqueConstraint("class_id", "section_id", "period_id", "day_of_week", name="uq_timetable_slot"),
        # NULL teacher_id never collides, so unassigned slots are unconstrained
        UniqueConstraint("teacher_id", "period_id", "day_of_week", name="uq_timetable_teacher_slot"),
    )

    id = Column(Integer, primary_key=True, index=True)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False)
    section_id = Column(Integer, ForeignKey("sections.id"), nullable=False)
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=True)
    teacher_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    period_id = Column(Integer, ForeignKey("periods.id"), nullable=False)
    day_of_week = Column(Integer, nullable=False)  # 0=Sunday ... 6=Saturday
    room_number = Column(String(50), nullable=True)

    period = relationship("Period")
    subject = relationship("Subject")
