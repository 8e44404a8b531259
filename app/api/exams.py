# app/api/exams.py
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_session, get_current_user, get_db, require_admin, require_teacher
from app.crud import academic as crud_academic
from app.crud import exam as crud_exam
from app.db.models.user import User
from app.schemas.common import Envelope
from app.schemas.exam import (
    ExamCreate, ExamOut, ExamSubjectCreate, ExamSubjectOut, ExamTypeCreate, ExamTypeOut,
    GradeBandIn, GradeBandOut, MarkOut, MarksSubmit, ProcessResultsOut, ProcessResultsRequest,
    PublishResultsRequest, ResultOut,
)
from app.services import grading, results

router = APIRouter()


# ===========================
#         EXAM TYPES
# ===========================

@router.get("/types", response_model=Envelope[List[ExamTypeOut]])
def get_exam_types(db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    return {"data": crud_exam.list_exam_types(db)}


@router.post("/types", response_model=Envelope[ExamTypeOut], status_code=201)
def add_exam_type(payload: ExamTypeCreate, db: Session = Depends(get_db), current_user=Depends(require_admin)):
    return {"message": "Exam type created", "data": crud_exam.create_exam_type(db, payload)}


# ===========================
#           EXAMS
# ===========================

@router.get("/", response_model=Envelope[List[ExamOut]])
def get_exams(
    academic_session_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    session_id = academic_session_id or get_current_session(db).id
    return {"data": crud_exam.list_exams(db, session_id)}


@router.post("/", response_model=Envelope[ExamOut], status_code=201)
def create_exam(
    payload: ExamCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    if payload.academic_session_id:
        session = crud_academic.get_session(db, payload.academic_session_id)
    else:
        session = get_current_session(db)
    exam = crud_exam.create_exam(db, payload, session, created_by=current_user.id)
    return {"message": "Exam created successfully", "data": exam}


@router.get("/{exam_id}", response_model=Envelope[ExamOut])
def get_exam(exam_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    return {"data": crud_exam.get_exam(db, exam_id)}


# ===========================
#    EXAM SUBJECT SCHEDULES
# ===========================

@router.get("/{exam_id}/subjects", response_model=Envelope[List[ExamSubjectOut]])
def get_exam_subjects(exam_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    crud_exam.get_exam(db, exam_id)
    return {"data": crud_exam.list_exam_subjects(db, exam_id)}


@router.post("/{exam_id}/subjects", response_model=Envelope[ExamSubjectOut], status_code=201)
def create_exam_subject(
    exam_id: int,
    payload: ExamSubjectCreate,
    db: Session = Depends(get_db),
    current_user=Depends(require_admin),
):
    exam_subject = crud_exam.create_exam_subject(db, exam_id, payload)
    return {"message": "Exam subject created successfully", "data": exam_subject}


# ===========================
#        MARKS ENTRY
# ===========================

@router.get("/marks/{exam_subject_id}", response_model=Envelope[List[MarkOut]])
def get_marks(exam_subject_id: int, db: Session = Depends(get_db), current_user=Depends(require_teacher)):
    return {"data": crud_exam.list_marks(db, exam_subject_id)}


@router.post("/marks")
def save_marks(payload: MarksSubmit, db: Session = Depends(get_db), current_user: User = Depends(require_teacher)):
    count = crud_exam.save_marks(db, payload.exam_subject_id, payload.marks, entered_by=current_user.id)
    return {"success": True, "message": "Marks saved successfully", "data": {"updated_count": count}}


# ===========================
#       GRADING SYSTEM
# ===========================

@router.get("/grading/bands", response_model=Envelope[List[GradeBandOut]])
def get_grading_system(db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    return {"data": grading.ensure_default_bands(db)}


@router.put("/grading/bands", response_model=Envelope[List[GradeBandOut]])
def replace_grading_system(
    payload: List[GradeBandIn],
    db: Session = Depends(get_db),
    current_user=Depends(require_admin),
):
    return {"message": "Grading system updated", "data": grading.replace_bands(db, payload)}


# ===========================
#          RESULTS
# ===========================

@router.post("/results/process", response_model=Envelope[ProcessResultsOut])
def process_results(
    payload: ProcessResultsRequest,
    db: Session = Depends(get_db),
    current_user=Depends(require_admin),
):
    summary = results.process_results(db, payload.exam_id, payload.class_id, payload.section_id)
    return {"message": "Results processed successfully", "data": summary}


@router.post("/results/publish")
def publish_results(payload: PublishResultsRequest, db: Session = Depends(get_db), current_user=Depends(require_admin)):
    count = results.publish_results(db, payload.exam_id)
    return {"success": True, "message": "Results published successfully", "data": {"published": count}}


@router.get("/{exam_id}/results/{student_id}", response_model=Envelope[ResultOut])
def get_student_result(
    exam_id: int,
    student_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return {"data": results.get_student_result(db, exam_id, student_id)}


@router.get("/{exam_id}/merit-list", response_model=Envelope[List[ResultOut]])
def get_merit_list(
    exam_id: int,
    class_id: int,
    section_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user=Depends(require_teacher),
):
    return {"data": results.merit_list(db, exam_id, class_id, section_id)}
