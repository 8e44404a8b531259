# app/api/hostel.py
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, require_admin
from app.db.models.user import User
from app.schemas.common import Envelope
from app.schemas.hostel import (
    AllocationCreate,
    AllocationOut,
    HostelCreate,
    HostelOut,
    HostelStats,
    RoomCreate,
    RoomOut,
    VacateRequest,
)
from app.services import hostel as hostel_service

router = APIRouter()


@router.get("/", response_model=Envelope[List[HostelOut]])
def get_hostels(db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    return {"data": hostel_service.list_hostels(db)}


@router.post("/", response_model=Envelope[HostelOut], status_code=201)
def add_hostel(payload: HostelCreate, db: Session = Depends(get_db), current_user=Depends(require_admin)):
    return {"message": "Hostel created successfully", "data": hostel_service.create_hostel(db, payload)}


@router.delete("/{hostel_id}", response_model=Envelope[None])
def remove_hostel(hostel_id: int, db: Session = Depends(get_db), current_user=Depends(require_admin)):
    hostel_service.delete_hostel(db, hostel_id)
    return {"message": "Hostel deleted successfully"}


@router.get("/stats", response_model=Envelope[HostelStats])
def get_stats(db: Session = Depends(get_db), current_user=Depends(require_admin)):
    return {"data": hostel_service.hostel_stats(db)}


@router.get("/{hostel_id}/rooms", response_model=Envelope[List[RoomOut]])
def get_rooms(
    hostel_id: int,
    available_only: bool = False,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return {"data": hostel_service.list_rooms(db, hostel_id, available_only)}


@router.post("/{hostel_id}/rooms", response_model=Envelope[RoomOut], status_code=201)
def add_room(hostel_id: int, payload: RoomCreate, db: Session = Depends(get_db), current_user=Depends(require_admin)):
    return {"message": "Room created successfully", "data": hostel_service.create_room(db, hostel_id, payload)}


@router.delete("/rooms/{room_id}", response_model=Envelope[None])
def remove_room(room_id: int, db: Session = Depends(get_db), current_user=Depends(require_admin)):
    hostel_service.delete_room(db, room_id)
    return {"message": "Room deleted successfully"}


@router.get("/allocations", response_model=Envelope[List[AllocationOut]])
def get_allocations(
    hostel_id: Optional[int] = None,
    status: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user=Depends(require_admin),
):
    return {"data": hostel_service.list_allocations(db, hostel_id, status)}


@router.post("/allocations", response_model=Envelope[AllocationOut], status_code=201)
def allocate_room(payload: AllocationCreate, db: Session = Depends(get_db), current_user: User = Depends(require_admin)):
    allocation = hostel_service.allocate_room(
        db,
        payload.room_id,
        payload.student_id,
        payload.allocation_date,
        payload.bed_number,
        payload.monthly_rent,
        payload.remarks,
        allocated_by=current_user.id,
    )
    return {"message": "Room allocated successfully", "data": allocation}


@router.post("/allocations/{allocation_id}/vacate", response_model=Envelope[AllocationOut])
def vacate_room(
    allocation_id: int, payload: VacateRequest, db: Session = Depends(get_db), current_user=Depends(require_admin)
):
    allocation = hostel_service.vacate_room(db, allocation_id, payload.vacate_date, payload.remarks)
    return {"message": "Room vacated successfully", "data": allocation}


@router.get("/students/{student_id}", response_model=Envelope[AllocationOut])
def get_student_hostel(student_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    return {"data": hostel_service.student_allocation(db, student_id)}
