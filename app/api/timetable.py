# app/api/timetable.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, require_admin, require_teacher
from app.schemas.common import Envelope
from app.schemas.timetable import (
    ConflictCheckOut, PeriodCreate, PeriodOut, TimetableEntryCreate, TimetableEntryOut, WeekTimetable,
)
from app.services import timetable as timetable_service

router = APIRouter()


@router.get("/periods", response_model=Envelope[List[PeriodOut]])
def get_periods(db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    return {"data": timetable_service.list_periods(db)}


@router.post("/periods", response_model=Envelope[PeriodOut], status_code=201)
def create_period(payload: PeriodCreate, db: Session = Depends(get_db), current_user=Depends(require_admin)):
    return {"message": "Period created", "data": timetable_service.create_period(db, payload)}


@router.post("/entries", response_model=Envelope[TimetableEntryOut])
def save_timetable_entry(
    payload: TimetableEntryCreate,
    response: Response,
    db: Session = Depends(get_db),
    current_user=Depends(require_admin),
):
    entry, created = timetable_service.save_entry(db, payload)
    response.status_code = 201 if created else 200
    message = "Timetable entry created successfully" if created else "Timetable entry updated successfully"
    return {"message": message, "data": entry}


@router.delete("/entries/{entry_id}")
def delete_timetable_entry(entry_id: int, db: Session = Depends(get_db), current_user=Depends(require_admin)):
    timetable_service.delete_entry(db, entry_id)
    return {"success": True, "message": "Timetable entry deleted successfully"}


@router.get("/conflicts", response_model=Envelope[ConflictCheckOut])
def check_conflicts(
    teacher_id: int,
    period_id: int,
    day_of_week: int,
    exclude_entry_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user=Depends(require_teacher),
):
    busy, conflicts = timetable_service.has_conflict(db, teacher_id, period_id, day_of_week, exclude_entry_id)
    return {"data": {"has_conflict": busy, "conflicts": conflicts}}


@router.get("/class", response_model=Envelope[WeekTimetable])
def get_class_timetable(
    class_id: int,
    section_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return {"data": timetable_service.class_timetable(db, class_id, section_id)}


@router.get("/teachers/{teacher_id}", response_model=Envelope[WeekTimetable])
def get_teacher_timetable(teacher_id: int, db: Session = Depends(get_db), current_user=Depends(require_teacher)):
    return {"data": timetable_service.teacher_timetable(db, teacher_id)}
