from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session
from datetime import date
from typing import Callable, List, Optional

from app.api.deps import get_db, get_current_user, get_session_factory, require_teacher
from app.db.models.user import User
from app.schemas.attendance import (
    AttendanceDay, AttendanceOut, AttendanceStats, AttendanceSubmit, AttendanceSummaryOut,
    StudentAttendanceReport,
)
from app.schemas.common import Envelope
from app.services import attendance as attendance_service
from app.services.notifications import notify_absentees

router = APIRouter()


# Mark (or re-mark) a class/section for one day
@router.post("/mark", response_model=Envelope[AttendanceSummaryOut])
def mark_attendance(
    payload: AttendanceSubmit,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
    current_user: User = Depends(require_teacher),
):
    summary, absences = attendance_service.mark_attendance(
        db,
        payload.class_id,
        payload.section_id,
        payload.date,
        payload.records,
        marked_by=current_user.id,
    )
    if absences:
        # Guardians are texted after the response is sent
        background_tasks.add_task(notify_absentees, absences, session_factory)
    return {"message": "Attendance marked successfully", "data": summary}


@router.post("/finalize", response_model=Envelope[AttendanceSummaryOut])
def finalize_attendance(
    payload: AttendanceDay,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    summary = attendance_service.finalize_attendance(db, payload.class_id, payload.section_id, payload.date)
    return {"message": "Attendance finalized successfully", "data": summary}


# Marks of one class/section on one day
@router.get("/", response_model=Envelope[List[AttendanceOut]])
def get_attendance_by_date(
    class_id: int,
    section_id: int,
    date: date,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    return {"data": attendance_service.get_attendance_by_date(db, class_id, section_id, date)}


@router.get("/stats", response_model=Envelope[AttendanceStats])
def get_attendance_stats(
    class_id: int,
    section_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    stats = attendance_service.get_attendance_stats(db, class_id, section_id, start_date, end_date)
    return {"data": stats}


@router.get("/students/{student_id}", response_model=Envelope[StudentAttendanceReport])
def get_student_attendance(
    student_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return {"data": attendance_service.get_student_attendance(db, student_id, start_date, end_date)}
