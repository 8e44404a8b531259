# app/services/hostel.py
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import CapacityError, ConflictError, NotFoundError, ValidationError
from app.db.models.academic import Student
from app.db.models.hostel import Hostel, Room, RoomAllocation

logger = logging.getLogger(__name__)

HOSTEL_TYPES = ("boys", "girls", "mixed")


def create_hostel(db: Session, payload) -> Hostel:
    if payload.hostel_type not in HOSTEL_TYPES:
        raise ValidationError("Invalid hostel type", errors={"hostel_type": f"must be one of {', '.join(HOSTEL_TYPES)}"})
    if db.query(Hostel).filter(Hostel.name == payload.name).first():
        raise ConflictError("Hostel already exists")
    hostel = Hostel(**payload.model_dump(), total_capacity=0, occupied_capacity=0)
    db.add(hostel)
    db.commit()
    db.refresh(hostel)
    return hostel


def list_hostels(db: Session) -> List[Hostel]:
    return db.query(Hostel).filter(Hostel.is_active == True).order_by(Hostel.name).all()  # noqa: E712


def get_hostel(db: Session, hostel_id: int) -> Hostel:
    hostel = db.query(Hostel).filter(Hostel.id == hostel_id).first()
    if not hostel:
        raise NotFoundError("Hostel not found")
    return hostel


def _active_allocations(db: Session):
    return db.query(RoomAllocation).filter(RoomAllocation.status == "active")


def delete_hostel(db: Session, hostel_id: int) -> None:
    hostel = get_hostel(db, hostel_id)
    active = _active_allocations(db).join(Room).filter(Room.hostel_id == hostel_id).count()
    if active:
        raise ConflictError("Cannot delete hostel with active allocations", context={"active_allocations": active})
    for room in hostel.rooms:
        db.delete(room)
    db.delete(hostel)
    db.commit()
    logger.info("Hostel %s deleted", hostel_id)


def create_room(db: Session, hostel_id: int, payload) -> Room:
    hostel = get_hostel(db, hostel_id)
    if payload.capacity < 1:
        raise ValidationError("capacity must be at least 1", errors={"capacity": "min 1"})
    if db.query(Room).filter(Room.hostel_id == hostel_id, Room.room_number == payload.room_number).first():
        raise ConflictError("Room number already exists in this hostel")

    room = Room(hostel_id=hostel_id, occupied_capacity=0, **payload.model_dump())
    hostel.total_capacity += payload.capacity
    db.add(room)
    db.commit()
    db.refresh(room)
    return room


def list_rooms(db: Session, hostel_id: int, available_only: bool = False) -> List[Room]:
    query = db.query(Room).filter(Room.hostel_id == hostel_id, Room.is_active == True)  # noqa: E712
    if available_only:
        query = query.filter(Room.occupied_capacity < Room.capacity)
    return query.order_by(Room.room_number).all()


def delete_room(db: Session, room_id: int) -> None:
    room = db.query(Room).filter(Room.id == room_id).first()
    if not room:
        raise NotFoundError("Room not found")
    if _active_allocations(db).filter(RoomAllocation.room_id == room_id).count():
        raise ConflictError("Cannot delete room with active allocations")
    room.hostel.total_capacity = max(0, room.hostel.total_capacity - room.capacity)
    db.delete(room)
    db.commit()


def allocate_room(
    db: Session,
    room_id: int,
    student_id: int,
    allocation_date: Optional[date] = None,
    bed_number: Optional[str] = None,
    monthly_rent: Optional[float] = None,
    remarks: Optional[str] = None,
    allocated_by: Optional[int] = None,
) -> RoomAllocation:
    # Row lock on the room keeps the occupancy check and increment together
    room = db.query(Room).filter(Room.id == room_id).with_for_update().first()
    if not room:
        raise NotFoundError("Room not found")
    if not db.query(Student).filter(Student.id == student_id).first():
        raise NotFoundError("Student not found")

    if room.occupied_capacity >= room.capacity:
        raise CapacityError("Room is full", available=room.capacity - room.occupied_capacity, requested=1)

    current = _active_allocations(db).filter(RoomAllocation.student_id == student_id).first()
    if current:
        raise ConflictError(
            "Student already has an active room allocation", context={"allocation_id": current.id}
        )

    allocation = RoomAllocation(
        room_id=room_id,
        student_id=student_id,
        allocation_date=allocation_date or date.today(),
        bed_number=bed_number,
        monthly_rent=monthly_rent if monthly_rent is not None else room.monthly_rent,
        status="active",
        remarks=remarks,
        allocated_by=allocated_by,
    )
    room.occupied_capacity += 1
    room.hostel.occupied_capacity += 1
    db.add(allocation)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Student already has an active room allocation")
    db.refresh(allocation)
    logger.info("Room %s allocated to student %s (allocation_id=%s)", room_id, student_id, allocation.id)
    return allocation


def vacate_room(
    db: Session, allocation_id: int, vacate_date: Optional[date] = None, remarks: Optional[str] = None
) -> RoomAllocation:
    allocation = db.query(RoomAllocation).filter(RoomAllocation.id == allocation_id).first()
    if not allocation:
        raise NotFoundError("Allocation not found")
    if allocation.status != "active":
        raise ConflictError("Allocation is not active")

    allocation.status = "vacated"
    allocation.vacate_date = vacate_date or date.today()
    if remarks:
        allocation.remarks = remarks
    room = allocation.room
    room.occupied_capacity = max(0, room.occupied_capacity - 1)
    room.hostel.occupied_capacity = max(0, room.hostel.occupied_capacity - 1)
    db.commit()
    db.refresh(allocation)
    logger.info("Allocation %s vacated", allocation_id)
    return allocation


def list_allocations(
    db: Session, hostel_id: Optional[int] = None, status: Optional[str] = None
) -> List[RoomAllocation]:
    query = db.query(RoomAllocation)
    if hostel_id:
        query = query.join(Room).filter(Room.hostel_id == hostel_id)
    if status:
        query = query.filter(RoomAllocation.status == status)
    return query.order_by(RoomAllocation.allocation_date.desc(), RoomAllocation.id.desc()).all()


def student_allocation(db: Session, student_id: int) -> RoomAllocation:
    allocation = _active_allocations(db).filter(RoomAllocation.student_id == student_id).first()
    if not allocation:
        raise NotFoundError("No active hostel allocation found")
    return allocation


def hostel_stats(db: Session) -> dict:
    hostels = db.query(func.count(Hostel.id)).filter(Hostel.is_active == True).scalar()  # noqa: E712
    rooms, capacity, occupied = db.query(
        func.count(Room.id),
        func.coalesce(func.sum(Room.capacity), 0),
        func.coalesce(func.sum(Room.occupied_capacity), 0),
    ).filter(Room.is_active == True).one()  # noqa: E712
    return {
        "hostels": hostels,
        "rooms": rooms,
        "total_capacity": capacity,
        "occupied": occupied,
        "available": capacity - occupied,
        "occupancy_rate": round(occupied / capacity * 100, 2) if capacity else 0.0,
    }
