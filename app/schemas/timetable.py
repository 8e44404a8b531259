# app/schemas/timetable.py
from typing import Dict, List, Optional

from pydantic import BaseModel


class PeriodCreate(BaseModel):
    name: str
    start_time: str
    end_time: str
    order_index: int
    is_break: bool = False


class PeriodOut(PeriodCreate):
    id: int

    class Config:
        from_attributes = True


class TimetableEntryCreate(BaseModel):
    class_id: Optional[int] = None
    section_id: Optional[int] = None
    subject_id: Optional[int] = None
    teacher_id: Optional[int] = None
    period_id: Optional[int] = None
    day_of_week: Optional[int] = None
    room_number: Optional[str] = None


class TimetableEntryOut(BaseModel):
    id: int
    class_id: int
    section_id: int
    subject_id: Optional[int] = None
    teacher_id: Optional[int] = None
    period_id: int
    day_of_week: int
    room_number: Optional[str] = None

    class Config:
        from_attributes = True


class TimetableSlotOut(TimetableEntryOut):
    period: PeriodOut


class ConflictCheckOut(BaseModel):
    has_conflict: bool
    conflicts: List[TimetableEntryOut]


# day_of_week -> entries ordered by period
WeekTimetable = Dict[int, List[TimetableSlotOut]]
