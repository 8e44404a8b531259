# app/schemas/hostel.py
from datetime import date
from typing import Optional

from pydantic import BaseModel


class HostelCreate(BaseModel):
    name: str
    hostel_type: str
    address: Optional[str] = None
    warden_name: Optional[str] = None
    warden_phone: Optional[str] = None


class HostelOut(HostelCreate):
    id: int
    total_capacity: int
    occupied_capacity: int
    is_active: bool

    class Config:
        from_attributes = True


class RoomCreate(BaseModel):
    room_number: str
    capacity: int
    room_type: str = "shared"
    monthly_rent: float = 0


class RoomOut(RoomCreate):
    id: int
    hostel_id: int
    occupied_capacity: int
    is_active: bool

    class Config:
        from_attributes = True


class AllocationCreate(BaseModel):
    room_id: int
    student_id: int
    allocation_date: Optional[date] = None
    bed_number: Optional[str] = None
    monthly_rent: Optional[float] = None
    remarks: Optional[str] = None


class VacateRequest(BaseModel):
    vacate_date: Optional[date] = None
    remarks: Optional[str] = None


class AllocationOut(BaseModel):
    id: int
    room_id: int
    student_id: int
    allocation_date: date
    vacate_date: Optional[date] = None
    bed_number: Optional[str] = None
    monthly_rent: float
    status: str
    remarks: Optional[str] = None

    class Config:
        from_attributes = True


class HostelStats(BaseModel):
    hostels: int
    rooms: int
    total_capacity: int
    occupied: int
    available: int
    occupancy_rate: float
