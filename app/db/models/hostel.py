# app/db/models/hostel.py
from sqlalchemy import Boolean, Column, Date, Float, ForeignKey, Index, Integer, String, Text, UniqueConstraint, text
from sqlalchemy.orm import relationship
from app.db.base import Base


class Hostel(Base):
    __tablename__ = "hostels"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    hostel_type = Column(String(20), nullable=False)  # boys, girls, mixed
    address = Column(Text, nullable=True)
    warden_name = Column(String(200), nullable=True)
    warden_phone = Column(String(20), nullable=True)
    total_capacity = Column(Integer, default=0, nullable=False)
    occupied_capacity = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    rooms = relationship("Room", back_populates="hostel")


class Room(Base):
    __tablename__ = "rooms"
    __table_args__ = (UniqueConstraint("hostel_id", "room_number", name="uq_room_hostel_number"),)

    id = Column(Integer, primary_key=True, index=True)
    hostel_id = Column(Integer, ForeignKey("hostels.id"), nullable=False)
    room_number = Column(String(20), nullable=False)
    room_type = Column(String(20), default="shared", nullable=False)
    capacity = Column(Integer, nullable=False)
    occupied_capacity = Column(Integer, default=0, nullable=False)
    monthly_rent = Column(Float, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    hostel = relationship("Hostel", back_populates="rooms")


class RoomAllocation(Base):
    __tablename__ = "room_allocations"
    # At most one active allocation per student
    __table_args__ = (
        Index(
            "uq_room_allocation_active_student",
            "student_id",
            unique=True,
            sqlite_where=text("status = 'active'"),
            postgresql_where=text("status = 'active'"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False)
    allocation_date = Column(Date, nullable=False)
    vacate_date = Column(Date, nullable=True)
    bed_number = Column(String(10), nullable=True)
    monthly_rent = Column(Float, default=0, nullable=False)
    status = Column(String(20), default="active", nullable=False)  # active → vacated
    remarks = Column(Text, nullable=True)
    allocated_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    room = relationship("Room")
    student = relationship("Student")
