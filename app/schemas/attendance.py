from pydantic import BaseModel
from datetime import date
from typing import List, Optional


class AttendanceRecord(BaseModel):
    student_id: int
    status: Optional[str] = None  # present when omitted
    remarks: Optional[str] = None


class AttendanceSubmit(BaseModel):
    class_id: int
    section_id: int
    date: date
    records: List[AttendanceRecord]


class AttendanceDay(BaseModel):
    class_id: int
    section_id: int
    date: date


class AttendanceOut(BaseModel):
    id: int
    student_id: int
    class_id: int
    section_id: int
    date: date
    status: str
    remarks: Optional[str] = None

    class Config:
        from_attributes = True


class AttendanceSummaryOut(BaseModel):
    class_id: int
    section_id: int
    date: date
    total_students: int
    present_count: int
    absent_count: int
    late_count: int
    excused_count: int
    is_finalized: bool

    class Config:
        from_attributes = True


class AttendanceStats(BaseModel):
    total_days: int
    total_present: int
    total_absent: int
    total_late: int
    total_excused: int
    total_students: int
    average_attendance: float
    daily_stats: List[AttendanceSummaryOut]


class StudentAttendanceReport(BaseModel):
    total_days: int
    present_days: int
    absent_days: int
    late_days: int
    excused_days: int
    attendance_percentage: float
    records: List[AttendanceOut]
