# app/api/academic.py
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_session, get_current_user, get_db, require_admin
from app.crud import academic as crud_academic
from app.db.models.academic import AcademicSession
from app.schemas.academic import (
    AcademicSessionCreate, AcademicSessionOut, ClassCreate, ClassOut, SectionCreate, SectionOut,
    StudentCreate, StudentOut, SubjectCreate, SubjectOut,
)
from app.schemas.common import Envelope

router = APIRouter()


# ===========================
#     ACADEMIC SESSIONS
# ===========================

@router.get("/sessions", response_model=Envelope[List[AcademicSessionOut]])
def list_sessions(db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    return {"data": crud_academic.list_sessions(db)}


@router.get("/sessions/current", response_model=Envelope[AcademicSessionOut])
def current_session(session: AcademicSession = Depends(get_current_session), current_user=Depends(get_current_user)):
    return {"data": session}


@router.post("/sessions", response_model=Envelope[AcademicSessionOut], status_code=201)
def create_session(payload: AcademicSessionCreate, db: Session = Depends(get_db), current_user=Depends(require_admin)):
    return {"message": "Academic session created", "data": crud_academic.create_session(db, payload)}


# ===========================
#     CLASSES & SECTIONS
# ===========================

@router.get("/classes", response_model=Envelope[List[ClassOut]])
def list_classes(db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    return {"data": crud_academic.list_classes(db)}


@router.post("/classes", response_model=Envelope[ClassOut], status_code=201)
def create_class(payload: ClassCreate, db: Session = Depends(get_db), current_user=Depends(require_admin)):
    return {"message": "Class created", "data": crud_academic.create_class(db, payload.name)}


@router.post("/classes/{class_id}/sections", response_model=Envelope[SectionOut], status_code=201)
def create_section(
    class_id: int,
    payload: SectionCreate,
    db: Session = Depends(get_db),
    current_user=Depends(require_admin),
):
    return {"message": "Section created", "data": crud_academic.create_section(db, class_id, payload.name)}


# ===========================
#          SUBJECTS
# ===========================

@router.get("/subjects", response_model=Envelope[List[SubjectOut]])
def list_subjects(db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    return {"data": crud_academic.list_subjects(db)}


@router.post("/subjects", response_model=Envelope[SubjectOut], status_code=201)
def create_subject(payload: SubjectCreate, db: Session = Depends(get_db), current_user=Depends(require_admin)):
    return {"message": "Subject created", "data": crud_academic.create_subject(db, payload)}


# ===========================
#          STUDENTS
# ===========================

@router.get("/students", response_model=Envelope[List[StudentOut]])
def list_students(
    class_id: Optional[int] = None,
    section_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return {"data": crud_academic.list_students(db, class_id, section_id)}


@router.post("/students", response_model=Envelope[StudentOut], status_code=201)
def admit_student(payload: StudentCreate, db: Session = Depends(get_db), current_user=Depends(require_admin)):
    return {"message": "Student admitted", "data": crud_academic.create_student(db, payload)}
